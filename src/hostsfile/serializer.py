"""
Serializer for hosts files — the inverse of :func:`hostsfile.parser.parse`.

Records are grouped by ``line_number`` and emitted in ascending line
order.  A group's standalone comment comes first, followed by its
domain records joined onto one line.  Domain records inside a group
that disagree on ``ip`` or trailing comment are split onto separate
lines so no record is written under another record's address.
"""
from __future__ import annotations

from typing import Iterable

from core.host_record import HostRecord


def serialize_line(ip: str, domains: Iterable[str], comment: str = "") -> str:
    """Serialize one data line."""
    line = " ".join([ip, *domains])
    if comment:
        line = f"{line} {comment}"
    return line


def _group_by_line(records: Iterable[HostRecord]) -> dict[int, tuple[str, list[HostRecord]]]:
    groups: dict[int, tuple[str, list[HostRecord]]] = {}
    for record in records:
        comment, members = groups.get(record.line_number, ("", []))
        if record.is_comment:
            comment = record.comment
        else:
            members.append(record)
        groups[record.line_number] = (comment, members)
    return groups


def serialize(records: Iterable[HostRecord]) -> str:
    """Regenerate hosts file text from *records* (any order)."""
    lines: list[str] = []
    groups = _group_by_line(records)

    for line_number in sorted(groups):
        comment, members = groups[line_number]
        if comment:
            lines.append(comment)

        # (ip, trailing comment) -> domains, in encounter order
        entries: dict[tuple[str, str], list[str]] = {}
        for record in members:
            entries.setdefault((record.ip, record.comment), []).append(record.domain)
        for (ip, trailing), domains in entries.items():
            lines.append(serialize_line(ip, domains, trailing))

    return "\n".join(lines)
