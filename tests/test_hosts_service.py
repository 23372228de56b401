"""
Integration tests for HostsService.

These tests exercise the full read → command → write → history cycle
through the service layer on temporary files, including backups and
error reporting.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core import HostRecord, OperationResult, SequentialIdMinter
from services.hosts_service import HostsService


SAMPLE = "127.0.0.1 localhost\n# comment\n10.0.0.1 a.com b.com"


class StepClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture()
def service(hosts_file, backup_dir) -> HostsService:
    svc = HostsService(hosts_file, backup_dir, id_minter=SequentialIdMinter(), clock=StepClock())
    assert svc.initialize().success
    return svc


def _hosts(svc: HostsService) -> list[HostRecord]:
    result = svc.get_hosts()
    assert result.success
    return result.value


def _by_domain(svc: HostsService, domain: str) -> HostRecord:
    return next(r for r in _hosts(svc) if r.domain == domain)


def _entries(svc: HostsService):
    return sorted(r.content() for r in _hosts(svc))


def _text(path) -> str:
    return path.read_text(encoding="utf-8")


# ------------------------------------------------------------------
# initialize / get_hosts
# ------------------------------------------------------------------

class TestInitialize:

    def test_creates_backup_dir(self, service, backup_dir):
        assert backup_dir.is_dir()

    def test_idempotent(self, service):
        assert service.initialize().success

    def test_missing_hosts_file(self, tmp_path):
        svc = HostsService(tmp_path / "nope", tmp_path / "bk")
        result = svc.initialize()
        assert not result.success
        assert result.error == "Hosts file does not exist"
        assert result.kind == "InitError"
        assert str(tmp_path / "nope") in result.details

    def test_unreadable_hosts_file(self, tmp_path):
        path = tmp_path / "hosts"
        path.write_bytes(b"\xff\xff")
        result = HostsService(path, tmp_path / "bk").initialize()
        assert not result.success
        assert result.kind == "InitError"
        assert result.error == "Initialization failed"
        assert "Cannot read" in result.details

    def test_backup_dir_cannot_be_created(self, hosts_file, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        result = HostsService(hosts_file, blocker / "bk").initialize()
        assert not result.success
        assert result.error == "Initialization failed"
        assert result.kind == "InitError"


class TestGetHosts:

    def test_scenario(self, service):
        records = _hosts(service)
        assert len(records) == 4
        comment = [r for r in records if r.is_comment]
        assert [(c.line_number, c.comment) for c in comment] == [(2, "# comment")]
        line3 = [r for r in records if r.line_number == 3]
        assert [r.domain for r in line3] == ["a.com", "b.com"]
        assert {r.ip for r in line3} == {"10.0.0.1"}
        assert _by_domain(service, "localhost").line_number == 1

    def test_read_error(self, service, hosts_file):
        hosts_file.unlink()
        result = service.get_hosts()
        assert not result
        assert result.error == "Failed to read hosts file"
        assert result.to_json()["success"] is False

    def test_text_helpers(self, service):
        records = service.parse_hosts_file(SAMPLE)
        assert service.generate_hosts_content(records) == SAMPLE


# ------------------------------------------------------------------
# add
# ------------------------------------------------------------------

class TestAddHost:

    def test_scenario(self, service, hosts_file):
        result = service.add_host({"ip": "1.2.3.4", "domain": "x.com"})
        assert result.success
        assert result.value.line_number == 4
        assert len({r.line_number for r in _hosts(service)}) == 4
        assert _text(hosts_file) == SAMPLE + "\n1.2.3.4 x.com"
        assert service.generate_hosts_content(_hosts(service)) == SAMPLE + "\n1.2.3.4 x.com"

    def test_comment_is_normalized(self, service, hosts_file):
        service.add_host({"ip": "1.2.3.4", "domain": "x.com", "comment": "staging"})
        assert _text(hosts_file).endswith("\n1.2.3.4 x.com # staging")

    def test_accepts_a_record(self, service, hosts_file):
        service.add_host(HostRecord(id="ignored", ip="1.2.3.4", domain="x.com"))
        assert _text(hosts_file).endswith("\n1.2.3.4 x.com")

    def test_undo_inverts(self, service):
        before = _entries(service)
        service.add_host({"ip": "1.2.3.4", "domain": "x.com"})
        assert service.undo().success
        assert _entries(service) == before

    def test_undo_inverts_with_blank_lines(self, hosts_file, backup_dir):
        hosts_file.write_text("1.1.1.1 a\n\n\n2.2.2.2 b\n", encoding="utf-8")
        svc = HostsService(hosts_file, backup_dir)
        before = _entries(svc)
        svc.add_host({"ip": "3.3.3.3", "domain": "c"})
        svc.undo()
        assert _entries(svc) == before
        # blank lines are gone for good: documented normalization
        assert _text(hosts_file) == "1.1.1.1 a\n2.2.2.2 b"

    def test_failure_leaves_history_untouched(self, tmp_path):
        svc = HostsService(tmp_path, tmp_path / "bk")
        result = svc.add_host({"ip": "1.2.3.4", "domain": "x.com"})
        assert not result.success
        assert not svc.can_undo()


# ------------------------------------------------------------------
# update
# ------------------------------------------------------------------

class TestUpdateHost:

    def test_updates(self, service, hosts_file):
        old = _by_domain(service, "localhost")
        result = service.update_host(old, {"domain": "lh"})
        assert result.success
        assert result.value.domain == "lh"
        assert _text(hosts_file).splitlines()[0] == "127.0.0.1 lh"

    def test_not_found(self, service):
        ghost = HostRecord(id="line-99-ghost", ip="9.9.9.9", domain="ghost", line_number=99)
        result = service.update_host(ghost, {"domain": "x"})
        assert not result.success
        assert result.kind == "NotFoundError"
        assert result.error == "Record to update not found"
        assert not service.can_undo()

    def test_unspecified_fields_retained(self, service):
        old = _by_domain(service, "a.com")
        service.update_host(old, {"comment": "moved"})
        updated = _by_domain(service, "a.com")
        assert (updated.ip, updated.comment) == ("10.0.0.1", "# moved")

    def test_undo_inverts(self, service):
        before = _entries(service)
        service.update_host(_by_domain(service, "b.com"), {"ip": "10.9.9.9", "domain": "c.com"})
        assert service.undo().success
        assert _entries(service) == before

    def test_undo_of_sibling_ip_change_restores_bytes(self, service, hosts_file):
        service.update_host(_by_domain(service, "a.com"), {"ip": "9.9.9.9"})
        assert _text(hosts_file) == (
            "127.0.0.1 localhost\n# comment\n9.9.9.9 a.com\n10.0.0.1 b.com"
        )
        assert service.undo().success
        assert _text(hosts_file) == SAMPLE

    def test_collision_is_accepted(self, service):
        service.update_host(_by_domain(service, "b.com"), {"domain": "a.com"})
        assert [r.domain for r in _hosts(service)].count("a.com") == 2


# ------------------------------------------------------------------
# delete
# ------------------------------------------------------------------

class TestDeleteHost:

    def test_deletes(self, service, hosts_file):
        assert service.delete_host(_by_domain(service, "localhost")).success
        assert _text(hosts_file) == "# comment\n10.0.0.1 a.com b.com"

    def test_undo_inverts(self, service):
        before = _entries(service)
        service.delete_host(_by_domain(service, "a.com"))
        service.undo()
        assert _entries(service) == before

    def test_record_not_in_file_leaves_no_history(self, service, hosts_file):
        ghost = HostRecord(id="line-9-ghost.com", ip="9.9.9.9", domain="ghost.com", line_number=9)
        assert service.delete_host(ghost).success
        assert _text(hosts_file) == SAMPLE
        assert not service.can_undo()
        assert not service.undo().success
        assert _text(hosts_file) == SAMPLE

    def test_undo_redo_redo_lineage(self, service, hosts_file):
        service.delete_host(_by_domain(service, "localhost"))
        after = _text(hosts_file)
        service.undo()
        assert service.redo().success
        assert _text(hosts_file) == after


class TestDeleteHosts:

    def test_scenario(self, service, hosts_file):
        targets = [_by_domain(service, "a.com"), _by_domain(service, "b.com")]
        result = service.delete_hosts(targets)
        assert result.success
        assert [r.domain for r in result.value] == ["a.com", "b.com"]
        assert _text(hosts_file) == "127.0.0.1 localhost\n# comment"

        assert service.undo().success
        assert _text(hosts_file) == SAMPLE

    def test_batch_is_one_history_step(self, service):
        service.delete_hosts([_by_domain(service, "a.com"), _by_domain(service, "localhost")])
        service.undo()
        assert not service.can_undo()

    def test_nothing_removed_leaves_no_history(self, service, hosts_file):
        ghost = HostRecord(id="line-9-ghost.com", ip="9.9.9.9", domain="ghost.com", line_number=9)
        result = service.delete_hosts([ghost])
        assert result.success
        assert result.value == []
        assert not service.can_undo()
        assert _text(hosts_file) == SAMPLE


# ------------------------------------------------------------------
# undo / redo
# ------------------------------------------------------------------

class TestHistory:

    def test_empty(self, service):
        assert not service.can_undo()
        assert not service.can_redo()
        undo, redo = service.undo(), service.redo()
        assert (undo.error, undo.kind) == ("Nothing to undo", "NoHistoryError")
        assert (redo.error, redo.kind) == ("Nothing to redo", "NoHistoryError")

    def test_linearity(self, service):
        service.add_host({"ip": "1.1.1.1", "domain": "one"})
        service.undo()
        assert service.can_redo()
        service.add_host({"ip": "2.2.2.2", "domain": "two"})
        assert not service.can_redo()

    def test_long_sequence_unwinds(self, service, hosts_file):
        service.add_host({"ip": "1.1.1.1", "domain": "one"})
        service.update_host(_by_domain(service, "localhost"), {"domain": "lh"})
        service.delete_hosts([_by_domain(service, "a.com"), _by_domain(service, "one")])
        service.delete_host(_by_domain(service, "b.com"))
        final = _entries(service)

        while service.can_undo():
            assert service.undo().success
        assert sorted(r.content() for r in service.parse_hosts_file(SAMPLE)) == _entries(service)

        while service.can_redo():
            assert service.redo().success
        assert _entries(service) == final

    def test_failed_undo_is_reported_and_kept(self, service, hosts_file):
        service.add_host({"ip": "1.1.1.1", "domain": "one"})
        hosts_file.unlink()
        result = service.undo()
        assert not result.success
        assert result.kind == "ReadError"
        assert service.can_undo()
        assert not service.can_redo()


# ------------------------------------------------------------------
# backups
# ------------------------------------------------------------------

class TestBackups:

    def test_create_and_list(self, service, hosts_file):
        created = service.create_backup()
        assert created.success
        assert created.value.read_bytes() == hosts_file.read_bytes()
        listed = service.get_backups()
        assert listed.success
        assert [b.path for b in listed.value] == [created.value]

    def test_create_does_not_touch_history(self, service):
        service.add_host({"ip": "1.1.1.1", "domain": "one"})
        service.create_backup()
        assert service.can_undo()

    def test_list_newest_first(self, service):
        paths = [service.create_backup().value for _ in range(3)]
        assert [b.path for b in service.get_backups().value] == list(reversed(paths))

    def test_restore_resets_history(self, service, hosts_file):
        backup = service.create_backup().value
        service.add_host({"ip": "1.1.1.1", "domain": "one"})
        service.add_host({"ip": "2.2.2.2", "domain": "two"})
        service.undo()
        assert service.can_undo() and service.can_redo()

        assert service.restore_backup(backup).success
        assert _text(hosts_file) == SAMPLE
        assert not service.can_undo()
        assert not service.can_redo()

    def test_restore_missing(self, service, tmp_path):
        service.add_host({"ip": "1.1.1.1", "domain": "one"})
        result = service.restore_backup(tmp_path / "nope.bak")
        assert result.kind == "NotFoundError"
        assert result.error == "Backup file does not exist"
        assert service.can_undo()

    def test_backup_of_missing_file(self, service, hosts_file):
        hosts_file.unlink()
        result = service.create_backup()
        assert not result.success
        assert result.error == "Failed to create backup"

    def test_list_without_directory(self, tmp_path, hosts_file):
        svc = HostsService(hosts_file, tmp_path / "never-created")
        result = svc.get_backups()
        assert result.success
        assert result.value == []


class TestOperationResult:

    def test_ok_json(self):
        assert OperationResult.ok([1]).to_json() == {"success": True}

    def test_fail_json(self):
        assert OperationResult.fail("boom", "why").to_json() == {
            "success": False, "error": "boom", "details": "why",
        }
