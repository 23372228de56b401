"""
Backups — byte-for-byte snapshots of the hosts file.

File names follow ``hosts-backup-<timestamp>.bak`` where the timestamp
is an ISO 8601 UTC time with ``:`` and ``.`` replaced by ``-``, e.g.
``hosts-backup-2024-05-01T09-30-12-345Z.bak``.

The manager knows nothing about undo history; the service clears it
after a restore.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

from core.errors import BackupError, ListError, NotFoundError

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "hosts-backup-"
BACKUP_SUFFIX = ".bak"

_STAMP_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})T(\d{2})-(\d{2})-(\d{2})-(\d{3})Z$"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 UTC with millisecond precision, file-name safe."""
    moment = moment.astimezone(timezone.utc)
    iso = moment.strftime("%Y-%m-%dT%H:%M:%S") + f".{moment.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def parse_timestamp(stamp: str) -> datetime | None:
    """Inverse of :func:`format_timestamp`; ``None`` if *stamp* does not match."""
    m = _STAMP_RE.match(stamp)
    if m is None:
        return None
    year, month, day, hour, minute, second, millis = (int(g) for g in m.groups())
    try:
        return datetime(year, month, day, hour, minute, second, millis * 1000, tzinfo=timezone.utc)
    except ValueError:
        return None


def backup_filename(moment: datetime) -> str:
    return f"{BACKUP_PREFIX}{format_timestamp(moment)}{BACKUP_SUFFIX}"


def is_backup_filename(name: str) -> bool:
    return name.startswith(BACKUP_PREFIX) and name.endswith(BACKUP_SUFFIX)


@dataclass(frozen=True, slots=True)
class BackupInfo:
    """Metadata of one backup file."""
    filename: str
    path: Path
    size: int
    created: datetime

    def to_json(self) -> dict:
        return {
            "filename": self.filename,
            "path": str(self.path),
            "size": self.size,
            "created": self.created.isoformat(),
        }


class BackupManager:
    """Create, list and restore snapshots of *hosts_path* under *backup_dir*."""

    __slots__ = ("hosts_path", "backup_dir", "_clock")

    def __init__(
        self,
        hosts_path: str | Path,
        backup_dir: str | Path,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.hosts_path = Path(hosts_path)
        self.backup_dir = Path(backup_dir)
        self._clock = clock

    def ensure_dir(self) -> None:
        """Create the backup directory if missing.  Safe to call repeatedly."""
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackupError(f"Cannot create backup directory {self.backup_dir}: {exc}") from exc

    def create(self) -> Path:
        """Snapshot the hosts file.  Returns the path of the new backup."""
        self.ensure_dir()
        try:
            content = self.hosts_path.read_bytes()
        except OSError as exc:
            raise BackupError(f"Cannot read {self.hosts_path}: {exc}") from exc

        moment = self._clock()
        target = self.backup_dir / backup_filename(moment)
        while target.exists():
            moment += timedelta(milliseconds=1)
            target = self.backup_dir / backup_filename(moment)

        try:
            target.write_bytes(content)
        except OSError as exc:
            raise BackupError(f"Cannot write backup {target}: {exc}") from exc

        logger.info("Created backup %s (%d bytes)", target.name, len(content))
        return target

    def restore(self, path: str | Path) -> None:
        """Copy the backup at *path* over the hosts file."""
        source = Path(path)
        if not source.is_file():
            raise NotFoundError(f"Backup not found: {source}")
        try:
            self.hosts_path.write_bytes(source.read_bytes())
        except OSError as exc:
            raise BackupError(f"Cannot restore {source}: {exc}") from exc
        logger.info("Restored hosts file from %s", source.name)

    def list(self) -> list[BackupInfo]:
        """All backups, newest first.  Empty if the directory does not exist yet."""
        if not self.backup_dir.is_dir():
            return []
        try:
            backups = [
                self._info(entry)
                for entry in self.backup_dir.iterdir()
                if is_backup_filename(entry.name) and entry.is_file()
            ]
        except OSError as exc:
            raise ListError(f"Cannot list backups in {self.backup_dir}: {exc}") from exc
        backups.sort(key=lambda b: b.created, reverse=True)
        return backups

    @staticmethod
    def _info(entry: Path) -> BackupInfo:
        stat = entry.stat()
        stamp = entry.name[len(BACKUP_PREFIX):-len(BACKUP_SUFFIX)]
        created = parse_timestamp(stamp)
        if created is None:
            created = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
        return BackupInfo(filename=entry.name, path=entry, size=stat.st_size, created=created)
