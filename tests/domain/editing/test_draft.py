from __future__ import annotations

from datetime import UTC, datetime

import pytest

from profilesync.domain.editing import DraftStateStore
from profilesync.domain.model import FieldGroup, FieldName, Language, SessionIdentity


def test_load_from_seeds_both_copies_and_is_clean(identity: SessionIdentity) -> None:
    store = DraftStateStore()

    store.load_from(identity)

    assert store.original == store.draft
    assert store.original[FieldName.DISPLAY_NAME] == "Ann"
    assert store.original[FieldName.LANGUAGE] is Language.EN
    assert store.keys == frozenset(FieldName)
    assert store.last_synced_at is not None
    assert not store.is_dirty()


def test_load_from_profile_group_only_tracks_profile_keys(identity: SessionIdentity) -> None:
    store = DraftStateStore()

    store.load_from(identity, (FieldGroup.PROFILE,))

    assert store.keys == {FieldName.DISPLAY_NAME, FieldName.EMAIL}


def test_set_field_marks_dirty_and_revert_restores(store: DraftStateStore) -> None:
    store.set_field(FieldName.DISPLAY_NAME, "Ann Lee")

    assert store.is_dirty()
    assert store.changed_fields() == {FieldName.DISPLAY_NAME: "Ann Lee"}
    assert store.original[FieldName.DISPLAY_NAME] == "Ann"

    store.revert()

    assert not store.is_dirty()
    assert store.draft[FieldName.DISPLAY_NAME] == "Ann"


def test_set_field_accepts_plain_string_keys(store: DraftStateStore) -> None:
    store.set_field("email", "ann@y.com")

    assert store.draft[FieldName.EMAIL] == "ann@y.com"


def test_set_field_back_to_original_value_is_clean(store: DraftStateStore) -> None:
    store.set_field(FieldName.PUSH_NOTIFICATIONS, False)
    store.set_field(FieldName.PUSH_NOTIFICATIONS, True)

    assert not store.is_dirty()


def test_language_compares_by_member_not_spelling(store: DraftStateStore) -> None:
    store.set_field(FieldName.LANGUAGE, "en")

    assert not store.is_dirty()

    store.set_field(FieldName.LANGUAGE, Language.FR)

    assert store.changed_fields() == {FieldName.LANGUAGE: Language.FR}


@pytest.mark.parametrize("key", ["nickname", FieldName.PUSH_NOTIFICATIONS])
def test_set_field_rejects_untracked_keys(identity: SessionIdentity, key: str) -> None:
    store = DraftStateStore()
    store.load_from(identity, (FieldGroup.PROFILE,))

    with pytest.raises(KeyError):
        store.set_field(key, True)

    assert store.keys == {FieldName.DISPLAY_NAME, FieldName.EMAIL}


def test_merge_remote_overlays_present_keys_only(store: DraftStateStore) -> None:
    store.set_field(FieldName.LANGUAGE, Language.ES)
    before_keys = store.keys

    applied = store.merge_remote({FieldName.DISPLAY_NAME: "Ann Lee"})

    assert applied == {FieldName.DISPLAY_NAME: "Ann Lee"}
    assert store.original[FieldName.DISPLAY_NAME] == "Ann Lee"
    assert store.draft[FieldName.DISPLAY_NAME] == "Ann Lee"
    # Settings are untouched by a profile-only response.
    assert store.draft[FieldName.LANGUAGE] is Language.ES
    assert store.original[FieldName.LANGUAGE] is Language.EN
    assert store.keys == before_keys
    assert set(store.draft) == set(store.original)


def test_merge_remote_ignores_untracked_keys(identity: SessionIdentity) -> None:
    store = DraftStateStore()
    store.load_from(identity, (FieldGroup.PROFILE,))

    applied = store.merge_remote({FieldName.LANGUAGE: Language.FR, FieldName.EMAIL: "a@b.c"})

    assert applied == {FieldName.EMAIL: "a@b.c"}
    assert FieldName.LANGUAGE not in store.original
    assert FieldName.LANGUAGE not in store.draft


def test_merge_remote_refreshes_sync_time_but_commit_local_does_not(
    identity: SessionIdentity,
) -> None:
    ticks = iter(
        [
            datetime(2025, 1, 1, tzinfo=UTC),
            datetime(2025, 1, 2, tzinfo=UTC),
            datetime(2025, 1, 3, tzinfo=UTC),
        ]
    )
    store = DraftStateStore(clock=lambda: next(ticks))
    store.load_from(identity)

    store.merge_remote({FieldName.EMAIL: "ann@y.com"})
    assert store.last_synced_at == datetime(2025, 1, 2, tzinfo=UTC)

    store.commit_local({FieldName.EMAIL: "ann@z.com"})
    assert store.last_synced_at == datetime(2025, 1, 2, tzinfo=UTC)
    assert store.original[FieldName.EMAIL] == "ann@z.com"
    assert not store.is_dirty()
