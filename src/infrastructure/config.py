"""Application configuration.

Two settings, each overridable from the environment:

    HOSTS_EDITOR_HOSTS_PATH   path of the hosts file to edit
    HOSTS_EDITOR_BACKUP_DIR   directory that receives backups

Defaults are the platform hosts file and a per-application backup
directory (``%APPDATA%/hosts-manager/backups`` on Windows,
``~/.local/share/hosts-manager/backups`` elsewhere).
"""
from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ValidationError

from core.errors import InitError

APP_DIR_NAME = "hosts-manager"

ENV_HOSTS_PATH = "HOSTS_EDITOR_HOSTS_PATH"
ENV_BACKUP_DIR = "HOSTS_EDITOR_BACKUP_DIR"


def default_hosts_path(env: Mapping[str, str], platform: str = sys.platform) -> Path:
    if platform.startswith("win"):
        root = env.get("SystemRoot", r"C:\Windows")
        return Path(root) / "System32" / "drivers" / "etc" / "hosts"
    return Path("/etc/hosts")


def default_backup_dir(env: Mapping[str, str], platform: str = sys.platform) -> Path:
    if platform.startswith("win"):
        appdata = env.get("APPDATA")
        if appdata:
            base = Path(appdata)
        else:
            base = Path(env.get("USERPROFILE", str(Path.home()))) / "AppData" / "Roaming"
    else:
        base = Path(env.get("XDG_DATA_HOME", str(Path.home() / ".local" / "share")))
    return base / APP_DIR_NAME / "backups"


class HostsEditorConfig(BaseModel):
    hosts_path: Path
    backup_dir: Path


def load_config(
    env: Optional[Mapping[str, str]] = None,
    platform: str = sys.platform,
) -> HostsEditorConfig:
    """Build the configuration from *env* (defaults to ``os.environ``).

    Raises InitError if a value cannot be turned into a path.
    """
    env = os.environ if env is None else env
    raw = {
        "hosts_path": env.get(ENV_HOSTS_PATH) or default_hosts_path(env, platform),
        "backup_dir": env.get(ENV_BACKUP_DIR) or default_backup_dir(env, platform),
    }
    try:
        return HostsEditorConfig.model_validate(raw)
    except ValidationError as exc:
        raise InitError(f"Invalid configuration: {exc}") from exc
