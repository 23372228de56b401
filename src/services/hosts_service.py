"""
HostsService — the bridge between the UI layer and the core domain.

Manages:
- The hosts store (whole-file read / write, no cached records)
- Undo / redo history of every mutation
- Backups of the hosts file

Every public operation returns an :class:`OperationResult`.  Errors from
the core are caught here and reported as ``{error, details}``; nothing
from the :class:`HostsError` family escapes.  A command is pushed to
history only after its write succeeded.
"""
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Union

from core import (
    AddCmd,
    BackupError,
    CommandHistory,
    DeleteBatchCmd,
    DeleteCmd,
    HostRecord,
    HostsError,
    IdMinter,
    InitError,
    ListError,
    NoHistoryError,
    NotFoundError,
    OperationResult,
    ReadError,
    SequentialIdMinter,
    UpdateCmd,
    WriteError,
    apply_command,
    editable_changes,
    locate,
    next_line_number,
    normalize_comment,
)
from hostsfile import parser, serializer
from infrastructure.backup import BackupManager, utc_now
from infrastructure.config import HostsEditorConfig
from infrastructure.hosts_io import HostsStore

logger = logging.getLogger(__name__)

Fields = Union[Mapping[str, Any], HostRecord]

# Operator-facing messages per error kind; call sites add their own
# message for the kind that is specific to them.
_MESSAGES: dict[type[HostsError], str] = {
    ReadError: "Failed to read hosts file",
    WriteError: "Failed to write hosts file",
    NoHistoryError: "No history",
    BackupError: "Backup operation failed",
    ListError: "Failed to list backups",
    InitError: "Initialization failed",
    NotFoundError: "Not found",
}


def _as_fields(fields: Fields) -> Mapping[str, Any]:
    return fields.to_json() if isinstance(fields, HostRecord) else fields


class HostsService:
    """
    Facade that the UI bridge calls.  One instance per hosts file.
    """

    def __init__(
        self,
        hosts_path: str | Path,
        backup_dir: str | Path,
        *,
        id_minter: Optional[IdMinter] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = HostsStore(hosts_path)
        self._backups = BackupManager(hosts_path, backup_dir, clock=clock)
        self._history = CommandHistory()
        self._mint_id: IdMinter = id_minter or SequentialIdMinter()

    @classmethod
    def from_config(cls, config: HostsEditorConfig, **kwargs: Any) -> HostsService:
        return cls(config.hosts_path, config.backup_dir, **kwargs)

    @property
    def hosts_path(self) -> Path:
        return self._store.path

    @property
    def backup_dir(self) -> Path:
        return self._backups.backup_dir

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> OperationResult:
        """Check the hosts file is there and readable, and create the backup directory."""
        if not self._store.exists():
            return self._fail(
                InitError(f"path: {self._store.path}"),
                {InitError: "Hosts file does not exist"},
            )
        try:
            records = self._store.read_all()
            self._backups.ensure_dir()
        except HostsError as exc:
            return self._fail(InitError(str(exc)))
        logger.info("Initialized hosts service for %s: %d records", self._store.path, len(records))
        return OperationResult.ok()

    # ------------------------------------------------------------------
    # Text <-> records
    # ------------------------------------------------------------------

    @staticmethod
    def parse_hosts_file(content: str) -> list[HostRecord]:
        return parser.parse(content)

    @staticmethod
    def generate_hosts_content(records: Iterable[HostRecord]) -> str:
        return serializer.serialize(records)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read_hosts_file(self) -> OperationResult:
        try:
            return OperationResult.ok(self._store.read_all())
        except HostsError as exc:
            return self._fail(exc)

    def get_hosts(self) -> OperationResult:
        """All records currently in the file."""
        return self.read_hosts_file()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_host(self, fields: Fields) -> OperationResult:
        """Append a new ``ip domain [#comment]`` line.  Value: the persisted record."""
        fields = _as_fields(fields)
        try:
            records = self._store.read_all()
            record = HostRecord(
                id=self._mint_id(),
                ip=str(fields.get("ip", "")).strip(),
                domain=str(fields.get("domain", "")).strip(),
                comment=normalize_comment(str(fields.get("comment") or "")),
                line_number=next_line_number(records),
            )
            executed = apply_command(AddCmd(record), self._store)
        except HostsError as exc:
            return self._fail(exc)

        self._history.push(executed)
        logger.info("Added %s %s at line %d", record.ip, record.domain, executed.record.line_number)
        return OperationResult.ok(executed.record)

    def update_host(self, old_record: HostRecord, new_fields: Fields) -> OperationResult:
        """Overwrite the editable fields of *old_record*.  Value: the updated record."""
        try:
            records = self._store.read_all()
            idx = locate(records, old_record)
            if idx is None:
                raise NotFoundError(f"id: {old_record.id}")
            cmd = UpdateCmd(before=records[idx], changes=editable_changes(_as_fields(new_fields)))
            executed = apply_command(cmd, self._store)
        except HostsError as exc:
            return self._fail(exc, {NotFoundError: "Record to update not found"})

        self._history.push(executed)
        logger.info("Updated %s (%s)", old_record.id, ", ".join(k for k, _ in executed.changes))
        return OperationResult.ok(executed.after)

    def delete_host(self, record: HostRecord) -> OperationResult:
        """Remove one record.  A record that is not in the file leaves no history."""
        try:
            self._store.read_all()
            executed = apply_command(DeleteCmd(record), self._store)
        except HostsError as exc:
            return self._fail(exc)

        if executed.removed is None:
            logger.info("Delete of %s: not in file, nothing to undo", record.id)
            return OperationResult.ok()
        self._history.push(executed)
        logger.info("Deleted %s", record.id)
        return OperationResult.ok()

    def delete_hosts(self, records: Sequence[HostRecord]) -> OperationResult:
        """Remove several records as one undoable step.  Value: the records removed."""
        try:
            self._store.read_all()
            executed = apply_command(DeleteBatchCmd(tuple(records)), self._store)
        except HostsError as exc:
            return self._fail(exc)

        if executed.removed:
            self._history.push(executed)
        logger.info("Deleted %d of %d requested records", len(executed.removed), len(records))
        return OperationResult.ok(list(executed.removed))

    # ------------------------------------------------------------------
    # Undo / Redo
    # ------------------------------------------------------------------

    def undo(self) -> OperationResult:
        try:
            cmd = self._history.undo(self._store)
        except HostsError as exc:
            return self._fail(exc, {NoHistoryError: "Nothing to undo"})
        logger.info("Undo %s", cmd.kind.value)
        return OperationResult.ok()

    def redo(self) -> OperationResult:
        try:
            cmd = self._history.redo(self._store)
        except HostsError as exc:
            return self._fail(exc, {NoHistoryError: "Nothing to redo"})
        logger.info("Redo %s", cmd.kind.value)
        return OperationResult.ok()

    def can_undo(self) -> bool:
        return self._history.can_undo

    def can_redo(self) -> bool:
        return self._history.can_redo

    # ------------------------------------------------------------------
    # Backups
    # ------------------------------------------------------------------

    def create_backup(self) -> OperationResult:
        """Snapshot the hosts file.  Value: the backup path."""
        try:
            return OperationResult.ok(self._backups.create())
        except HostsError as exc:
            return self._fail(exc, {BackupError: "Failed to create backup"})

    def restore_backup(self, path: str | Path) -> OperationResult:
        """
        Copy a backup over the hosts file and clear undo / redo history.

        History is cleared whenever the copy was attempted, even if it
        failed half-way: commands recorded against the old content cannot
        be reversed against whatever is on disk now.
        """
        try:
            self._backups.restore(path)
        except NotFoundError as exc:
            return self._fail(exc, {NotFoundError: "Backup file does not exist"})
        except HostsError as exc:
            result = self._fail(exc, {BackupError: "Failed to restore backup"})
        else:
            result = OperationResult.ok()
        self._history.clear()
        return result

    def get_backups(self) -> OperationResult:
        """Backups, newest first.  Value: list of :class:`BackupInfo`."""
        try:
            return OperationResult.ok(self._backups.list())
        except HostsError as exc:
            return self._fail(exc)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _fail(
        exc: HostsError,
        messages: Optional[Mapping[type[HostsError], str]] = None,
    ) -> OperationResult:
        kind = type(exc)
        error = (messages or {}).get(kind) or _MESSAGES.get(kind, "Operation failed")
        logger.warning("%s: %s", error, exc)
        return OperationResult.fail(error, str(exc), kind=kind.__name__)
