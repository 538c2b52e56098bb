"""Exceptions raised inside campus_engine."""

from __future__ import annotations


class MalformedRecordError(ValueError):
    """A raw record cannot be canonicalized and must be skipped."""


class ConfigurationError(ValueError):
    """The loaded configuration holds an unusable value."""
