"""
CommandHistory — linear undo / redo over executed commands.
"""
from __future__ import annotations

import logging

from core.commands import Command, RecordStore, apply_command, reverse_command
from core.errors import NoHistoryError

logger = logging.getLogger(__name__)


class CommandHistory:
    """
    Two stacks of commands: ``applied`` (undoable) and ``undone`` (redoable).

    * :meth:`push` — record a command that has already been applied;
      discards the redo lineage.
    * :meth:`undo` — pop the most recent command and reverse it.
    * :meth:`redo` — re-apply the most recently undone command.

    A command only moves between stacks once its reverse / forward run
    has succeeded.  If the run raises, the command goes back where it
    came from and the error propagates.
    """

    __slots__ = ("_applied", "_undone")

    def __init__(self) -> None:
        self._applied: list[Command] = []
        self._undone: list[Command] = []

    # -- public API ------------------------------------------------

    def push(self, command: Command) -> None:
        """Record an applied *command*.  Clears the redo stack."""
        self._applied.append(command)
        self._undone.clear()

    def undo(self, store: RecordStore) -> Command:
        """Reverse the most recent command.  Raises *NoHistoryError* if empty."""
        if not self._applied:
            raise NoHistoryError("Nothing to undo")
        cmd = self._applied.pop()
        try:
            reverse_command(cmd, store)
        except Exception:
            self._applied.append(cmd)
            raise
        self._undone.append(cmd)
        logger.debug("Undo: %s", cmd.kind.value)
        return cmd

    def redo(self, store: RecordStore) -> Command:
        """Re-apply the most recently undone command.  Raises *NoHistoryError* if empty."""
        if not self._undone:
            raise NoHistoryError("Nothing to redo")
        cmd = self._undone.pop()
        try:
            executed = apply_command(cmd, store)
        except Exception:
            self._undone.append(cmd)
            raise
        self._applied.append(executed)
        logger.debug("Redo: %s", executed.kind.value)
        return executed

    @property
    def can_undo(self) -> bool:
        return bool(self._applied)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    @property
    def undo_depth(self) -> int:
        return len(self._applied)

    @property
    def redo_depth(self) -> int:
        return len(self._undone)

    def clear(self) -> None:
        """Discard all history."""
        self._applied.clear()
        self._undone.clear()
