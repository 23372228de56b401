"""
Command pattern for hosts mutations — enables undo / redo.

Commands are plain data.  :func:`apply_command` and
:func:`reverse_command` run them against a store passed in by the
caller; a command never holds a reference to the store.

Every run re-reads the file, mutates the fresh records and writes the
whole file back, so external edits made between two operations are
picked up rather than overwritten with a stale copy.

Concrete commands
-----------------
- :class:`AddCmd`
- :class:`UpdateCmd`
- :class:`DeleteCmd`
- :class:`DeleteBatchCmd`
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Mapping, Protocol, Sequence, Union

from core.errors import NotFoundError
from core.host_record import (
    EDITABLE_FIELDS,
    HostRecord,
    append_records,
    locate,
    next_line_number,
    same_entry,
)

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Minimal surface commands need from :class:`infrastructure.hosts_io.HostsStore`."""

    def read_all(self) -> list[HostRecord]: ...

    def write_all(self, records: Sequence[HostRecord]) -> list[HostRecord]: ...


class CommandKind(Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_BATCH = "delete_batch"


# ------------------------------------------------------------------
# Variants
# ------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AddCmd:
    """Append *record* on a new trailing line; undo removes it again."""
    kind: ClassVar[CommandKind] = CommandKind.ADD

    record: HostRecord


@dataclass(frozen=True, slots=True)
class UpdateCmd:
    """
    Overwrite the editable fields named in *changes* on *before*.

    ``after`` is filled in when the command runs and is what undo looks
    for, since after the write the persisted record is the new one.
    ``peers`` are the domain records that shared *before*'s line, in
    line order, so undo can put the record back among them.
    """
    kind: ClassVar[CommandKind] = CommandKind.UPDATE

    before: HostRecord
    changes: tuple[tuple[str, Any], ...]
    after: HostRecord | None = None
    peers: tuple[HostRecord, ...] = ()

    @property
    def fields(self) -> dict[str, Any]:
        return dict(self.changes)


@dataclass(frozen=True, slots=True)
class DeleteCmd:
    """
    Remove *record*.

    ``removed`` is the record the run actually took out of the file, or
    ``None`` if it was already gone; undo appends only that.
    """
    kind: ClassVar[CommandKind] = CommandKind.DELETE

    record: HostRecord
    removed: HostRecord | None = None


@dataclass(frozen=True, slots=True)
class DeleteBatchCmd:
    """
    Remove every record in *targets*.

    ``removed`` holds what was actually present when the command ran,
    so undo restores exactly that even if *targets* had gone stale.
    """
    kind: ClassVar[CommandKind] = CommandKind.DELETE_BATCH

    targets: tuple[HostRecord, ...]
    removed: tuple[HostRecord, ...] = ()


Command = Union[AddCmd, UpdateCmd, DeleteCmd, DeleteBatchCmd]


def editable_changes(fields: Mapping[str, Any]) -> tuple[tuple[str, Any], ...]:
    """Keep only the editable keys of *fields*, in a hashable form."""
    return tuple((k, fields[k]) for k in EDITABLE_FIELDS if k in fields and fields[k] is not None)


# ------------------------------------------------------------------
# Forward
# ------------------------------------------------------------------

def apply_command(cmd: Command, store: RecordStore) -> Command:
    """
    Run *cmd* forward against the current file.

    Returns the command as executed.  It may carry data captured during
    the run (the persisted identity of an added record, the records a
    delete actually removed); callers keep the returned value.
    """
    if isinstance(cmd, AddCmd):
        return _apply_add(cmd, store)
    if isinstance(cmd, UpdateCmd):
        return _apply_update(cmd, store)
    if isinstance(cmd, DeleteCmd):
        return _apply_delete(cmd, store)
    if isinstance(cmd, DeleteBatchCmd):
        return _apply_delete_batch(cmd, store)
    raise TypeError(f"Unknown command: {cmd!r}")


def _apply_add(cmd: AddCmd, store: RecordStore) -> AddCmd:
    records = store.read_all()
    # Recomputed on every run so appends made by someone else are kept.
    new = dataclasses.replace(cmd.record, line_number=next_line_number(records))
    written = store.write_all([*records, new])

    for persisted in reversed(written):
        if same_entry(persisted, new):
            return AddCmd(persisted)
    return AddCmd(new)


def _apply_update(cmd: UpdateCmd, store: RecordStore) -> UpdateCmd:
    records = store.read_all()
    idx = locate(records, cmd.before)
    if idx is None:
        raise NotFoundError(f"Record not found: {cmd.before.id}")

    current = records[idx]
    peers = tuple(
        r for r in records
        if r.line_number == current.line_number and not r.is_comment
    )
    updated = current.merged(cmd.fields)
    records[idx] = updated
    store.write_all(records)
    return dataclasses.replace(cmd, before=current, after=updated, peers=peers)


def _apply_delete(cmd: DeleteCmd, store: RecordStore) -> DeleteCmd:
    records = store.read_all()
    idx = locate(records, cmd.removed if cmd.removed is not None else cmd.record)
    if idx is None:
        logger.debug("Delete target %s already gone", cmd.record.id)
        store.write_all(records)
        return dataclasses.replace(cmd, removed=None)

    removed = records.pop(idx)
    store.write_all(records)
    return dataclasses.replace(cmd, removed=removed)


def _apply_delete_batch(cmd: DeleteBatchCmd, store: RecordStore) -> DeleteBatchCmd:
    records = store.read_all()

    # A redo looks for what the first run removed; those snapshots match
    # the restored records better than the caller's original targets.
    wanted = cmd.removed or cmd.targets
    chosen: set[int] = set()
    for target in wanted:
        idx = locate(records, target, exclude=chosen)
        if idx is not None:
            chosen.add(idx)

    removed = tuple(records[i] for i in sorted(chosen))
    store.write_all([r for i, r in enumerate(records) if i not in chosen])
    return dataclasses.replace(cmd, removed=removed)


# ------------------------------------------------------------------
# Reverse
# ------------------------------------------------------------------

def reverse_command(cmd: Command, store: RecordStore) -> None:
    """Undo *cmd* (as returned by :func:`apply_command`) against the current file."""
    if isinstance(cmd, AddCmd):
        records = store.read_all()
        idx = locate(records, cmd.record)
        if idx is not None:
            del records[idx]
        store.write_all(records)
    elif isinstance(cmd, UpdateCmd):
        _reverse_update(cmd, store)
    elif isinstance(cmd, DeleteCmd):
        records = store.read_all()
        restored = [cmd.removed] if cmd.removed is not None else []
        store.write_all(append_records(records, restored))
    elif isinstance(cmd, DeleteBatchCmd):
        records = store.read_all()
        store.write_all(append_records(records, cmd.removed))
    else:
        raise TypeError(f"Unknown command: {cmd!r}")


def _reverse_update(cmd: UpdateCmd, store: RecordStore) -> None:
    records = store.read_all()
    target = cmd.after if cmd.after is not None else cmd.before.merged(cmd.fields)
    idx = locate(records, target)
    if idx is None:
        raise NotFoundError(f"Record not found: {target.id}")

    old_values = {key: getattr(cmd.before, key) for key, _ in cmd.changes}
    restored = records.pop(idx).merged(old_values)
    pos, restored = _rejoin(records, restored, cmd, default=idx)
    records.insert(pos, restored)
    store.write_all(records)


def _rejoin(
    records: list[HostRecord],
    restored: HostRecord,
    cmd: UpdateCmd,
    default: int,
) -> tuple[int, HostRecord]:
    """
    Position and line number that put *restored* back among its peers.

    Changing ``ip`` or ``comment`` splits a record off a shared line.
    Peers still on file with the restored ``ip`` and ``comment`` take it
    back at its original place in the line; without any, *restored*
    stays where it is.
    """
    if cmd.before not in cmd.peers:
        return default, restored
    own = cmd.peers.index(cmd.before)

    # (original order, current position) of peers that can take it back
    found: list[tuple[int, int]] = []
    used: set[int] = set()
    for order, peer in enumerate(cmd.peers):
        if order == own:
            continue
        i = locate(records, peer, exclude=used)
        if i is None or not same_entry(records[i], peer):
            continue
        used.add(i)
        if (records[i].ip, records[i].comment) == (restored.ip, restored.comment):
            found.append((order, i))
    if not found:
        return default, restored

    line = records[found[0][1]].line_number
    found = [(order, i) for order, i in found if records[i].line_number == line]
    later = [i for order, i in found if order > own]
    pos = min(later) if later else max(i for _, i in found) + 1
    return pos, dataclasses.replace(restored, line_number=line)
