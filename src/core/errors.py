"""
Error hierarchy for the hosts editing system.

Every fault raised by the core inherits from ``HostsError`` so the
service layer can catch a single base type and turn it into an
:class:`~core.result.OperationResult`.
"""
from __future__ import annotations


class HostsError(Exception):
    """Base class for all hosts editing errors."""


class ReadError(HostsError):
    """The hosts file is missing or could not be read."""


class WriteError(HostsError):
    """The hosts file could not be written (permission denied, disk full, ...)."""


class NotFoundError(HostsError):
    """A referenced record or backup does not exist in the current state."""


class NoHistoryError(HostsError):
    """Undo or redo was requested with an empty stack."""


class BackupError(HostsError):
    """A backup could not be created or restored."""


class ListError(HostsError):
    """The backup directory could not be enumerated."""


class InitError(HostsError):
    """A startup precondition is not met."""
