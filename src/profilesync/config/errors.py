"""Errors raised while reading account service and storage settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting such as ``ACCOUNT_API_TIMEOUT_SECONDS`` holds an invalid value."""


class MissingConfigurationError(ConfigurationError):
    """A required setting such as ``ACCOUNT_API_TOKEN`` is absent or blank."""
