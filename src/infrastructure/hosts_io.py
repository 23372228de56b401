"""
Hosts I/O — read the hosts file into records, write records back.

This is the store every command runs against.  There is no cached
record list: each :meth:`HostsStore.read_all` goes to disk, and each
:meth:`HostsStore.write_all` replaces the whole file in one call.

Load flow:
    file → read_text → parser.parse → list[HostRecord]

Save flow:
    list[HostRecord] → serializer.serialize → write_text
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from core.errors import ReadError, WriteError
from core.host_record import HostRecord
from hostsfile.parser import parse
from hostsfile.serializer import serialize

logger = logging.getLogger(__name__)

ENCODING = "utf-8"


class HostsStore:
    """Whole-file read / write access to one hosts file."""

    __slots__ = ("path",)

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read_text(self) -> str:
        """Raw file content.  Raises *ReadError* on a missing or unreadable file."""
        try:
            return self.path.read_text(encoding=ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise ReadError(f"Cannot read {self.path}: {exc}") from exc

    def read_all(self) -> list[HostRecord]:
        """Parse the current file content into records."""
        records = parse(self.read_text())
        logger.debug("Read %d records from %s", len(records), self.path)
        return records

    def write_all(self, records: Sequence[HostRecord]) -> list[HostRecord]:
        """
        Regenerate the file from *records*.

        Returns the records as the next :meth:`read_all` will see them
        (renumbered lines, derived ids).  Raises *WriteError* on I/O
        failure; the previous content is left as the OS left it.
        """
        content = serialize(records)
        try:
            self.path.write_text(content, encoding=ENCODING)
        except OSError as exc:
            raise WriteError(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Wrote %d records to %s", len(records), self.path)
        return parse(content)
