"""
HostRecord — the addressable unit of a hosts file.

A physical line ``10.0.0.1 a.com b.com`` becomes two sibling records
that share ``ip``, ``line_number`` and ``comment``.  A ``# ...`` line
becomes one comment-only record.  Records are rebuilt from disk on every
read; the file is the source of truth, not any in-memory list.
"""
from __future__ import annotations

import dataclasses
import itertools
from dataclasses import dataclass
from typing import Any, Collection, Iterable, Mapping, Optional, Protocol, Sequence

COMMENT_INDICATOR = "#"

# Fields a caller may change through add / update.
EDITABLE_FIELDS = ("ip", "domain", "comment")


def record_id(line_number: int, domain: str = "") -> str:
    """Deterministic id of a parsed record."""
    if not domain:
        return f"line-{line_number}"
    return f"line-{line_number}-{domain}"


def normalize_comment(text: str) -> str:
    """Make sure a non-empty comment starts with the comment marker.

    Whitespace runs are collapsed, matching what a re-read produces for
    a trailing comment.
    """
    text = " ".join(text.split())
    if text and not text.startswith(COMMENT_INDICATOR):
        return f"{COMMENT_INDICATOR} {text}"
    return text


@dataclass(frozen=True, slots=True)
class HostRecord:
    """
    One domain (or one standalone comment) of a hosts file.

    Attributes:
        id:          Stable within one read.  ``line-<n>-<domain>`` for
                     parsed records, minted (``new-<k>``) for records that
                     have not been written yet.
        ip:          Address; empty for comment-only records.
        domain:      Host name; empty for comment-only records.
        comment:     Trailing or standalone comment including the ``#``.
        is_comment:  ``True`` for a comment-only line.
        line_number: 1-based source line.  Siblings share it.
    """
    id: str
    ip: str = ""
    domain: str = ""
    comment: str = ""
    is_comment: bool = False
    line_number: int = 0

    def merged(self, fields: Mapping[str, Any]) -> HostRecord:
        """Return a copy with the editable *fields* overwritten."""
        changes = {k: fields[k] for k in EDITABLE_FIELDS if k in fields and fields[k] is not None}
        if "comment" in changes:
            changes["comment"] = normalize_comment(str(changes["comment"]))
        return dataclasses.replace(self, **changes)

    def content(self) -> tuple[str, str, str, bool]:
        """Identity-free view used to re-locate a record after renumbering."""
        return (self.ip, self.domain, self.comment, self.is_comment)

    def to_json(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, fields: Mapping[str, Any]) -> HostRecord:
        """Build a record from a JSON dict (``isComment``/``lineNumber`` also accepted)."""
        return cls(
            id=str(fields.get("id", "")),
            ip=str(fields.get("ip", "") or ""),
            domain=str(fields.get("domain", "") or ""),
            comment=str(fields.get("comment", "") or ""),
            is_comment=bool(fields.get("is_comment", fields.get("isComment", False))),
            line_number=int(fields.get("line_number", fields.get("lineNumber", 0)) or 0),
        )


def same_entry(a: HostRecord, b: HostRecord) -> bool:
    """``True`` when *a* and *b* describe the same entry, ignoring identity."""
    return a.content() == b.content()


# ------------------------------------------------------------------
# Id minting for records that have not been written yet
# ------------------------------------------------------------------

class IdMinter(Protocol):
    def __call__(self) -> str: ...


class SequentialIdMinter:
    """Mints ``new-1``, ``new-2``, ... from an in-process counter."""

    __slots__ = ("_counter", "_prefix")

    def __init__(self, prefix: str = "new", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self._prefix}-{next(self._counter)}"


# ------------------------------------------------------------------
# Record-set helpers used by commands
# ------------------------------------------------------------------

def next_line_number(records: Iterable[HostRecord]) -> int:
    """Line number of a new trailing physical line."""
    return max((r.line_number for r in records), default=0) + 1


def locate(
    records: Sequence[HostRecord],
    target: HostRecord,
    exclude: Collection[int] = (),
) -> Optional[int]:
    """
    Find *target* in a freshly read record list.

    Ids are derived from line numbers, so they shift whenever the file
    is regenerated.  Matching therefore prefers the exact id with the
    same content, then the last record with the same content, then the
    bare id.  Positions in *exclude* are skipped.
    """
    for i, record in enumerate(records):
        if i not in exclude and record.id == target.id and same_entry(record, target):
            return i
    for i in range(len(records) - 1, -1, -1):
        if i not in exclude and same_entry(records[i], target):
            return i
    for i, record in enumerate(records):
        if i not in exclude and record.id == target.id:
            return i
    return None


def append_records(
    current: Sequence[HostRecord],
    restored: Iterable[HostRecord],
) -> list[HostRecord]:
    """
    Append *restored* after *current* on fresh trailing lines.

    Records that shared a line keep sharing one; no restored record is
    merged into a line that already exists.
    """
    start = next_line_number(current)
    renumbered: dict[int, int] = {}
    out = list(current)
    for record in restored:
        if record.line_number not in renumbered:
            renumbered[record.line_number] = start + len(renumbered)
        out.append(dataclasses.replace(record, line_number=renumbered[record.line_number]))
    return out
