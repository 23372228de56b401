import sys
import os

import pytest

# Add src/ to sys.path so absolute imports (core.*, hostsfile.*, etc.) work.
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, os.path.join(_project_root, "src"))
sys.path.insert(0, _project_root)


SAMPLE_HOSTS = "127.0.0.1 localhost\n# comment\n10.0.0.1 a.com b.com"


@pytest.fixture()
def hosts_file(tmp_path):
    """A hosts file with one single-domain line, a comment and a two-domain line."""
    path = tmp_path / "hosts"
    path.write_text(SAMPLE_HOSTS, encoding="utf-8")
    return path


@pytest.fixture()
def backup_dir(tmp_path):
    return tmp_path / "backups"
