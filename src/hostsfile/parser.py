"""
Parser for hosts files.

Line format::

    <ip> <domain> [<domain> ...] [#comment]
    # standalone comment

Parsing never rejects content.  Blank lines and data lines with fewer
than two tokens produce no record and are therefore dropped when the
file is regenerated.
"""
from __future__ import annotations

from core.host_record import COMMENT_INDICATOR, HostRecord, record_id


def is_comment(text: str) -> bool:
    return text.strip().startswith(COMMENT_INDICATOR)


def is_empty(text: str) -> bool:
    return not text.strip()


def parse_line(text: str, line_number: int) -> list[HostRecord]:
    """Parse one physical line into zero or more sibling records."""
    content = text.strip()
    if not content:
        return []

    if content.startswith(COMMENT_INDICATOR):
        return [HostRecord(
            id=record_id(line_number),
            comment=content,
            is_comment=True,
            line_number=line_number,
        )]

    parts = content.split()
    if len(parts) < 2:
        return []

    ip, tokens = parts[0], parts[1:]
    domains = tokens
    comment = ""
    for i, token in enumerate(tokens):
        if token.startswith(COMMENT_INDICATOR):
            domains = tokens[:i]
            comment = " ".join(tokens[i:])
            break

    return [
        HostRecord(
            id=record_id(line_number, domain),
            ip=ip,
            domain=domain,
            comment=comment,
            line_number=line_number,
        )
        for domain in domains
    ]


def parse(content: str) -> list[HostRecord]:
    """Parse raw hosts file text into records ordered by line."""
    records: list[HostRecord] = []
    for line_number, line in enumerate(content.split("\n"), start=1):
        records.extend(parse_line(line, line_number))
    return records
