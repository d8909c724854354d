"""Shared service-layer exceptions."""

from __future__ import annotations


class BackupFormatError(Exception):
    """Backup payload could not be parsed or holds nothing restorable."""


class SessionNotReadyError(Exception):
    """Operation needs a session state that has not been reached yet."""
