import pytest

from main import build_parser, run_command
from shipplan import ledger, settings
from shipplan.status import Status

PLAN = (
    "FNSKU,Quantity,Pack Type,Staging Group,Unit Weight,Case QT,Case Length,Case Width,Case Height,Case Weight\n"
    "X001,20,Case,,,10,12,10,8,20\n"
    "X003,15,Loose,staging-a,2,,,,,\n"
)


def run(session, *argv):
    return run_command(build_parser().parse_args(list(argv)), session)


@pytest.fixture
def dirs(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "LOOKUP_DIR", tmp_path / "lookup")
    monkeypatch.setattr(settings, "OUTPUT_DIR", tmp_path / "output")
    return tmp_path


class TestCommands:

    def test_import_command(self, session, dirs):
        report = dirs / "shipping_plan_jul01.csv"
        report.write_text(PLAN)

        assert run(session, "import", "--report", str(report), "--group", "trunk") == 0
        assert session.store.groups() == ["trunk"]
        assert ledger.total_units(session.store.load("trunk")) == 35
        assert session.status_store.current("trunk") is Status.OPEN

    def test_import_without_plan_fails(self, session, dirs, monkeypatch):
        monkeypatch.setattr(settings, "INPUT_DIR", dirs / "empty")
        assert run(session, "import") == 1
        assert session.store.groups() == []

    def test_check_command(self, session, dirs, plan_entries):
        session.store.save("trunk", plan_entries)
        scan = dirs / "scan_jul01.csv"
        scan.write_text("FNSKU,UPC,Units Per Case,Cases\nX001,111,10,2\n")

        assert run(session, "check", "trunk", "--scan", str(scan), "--test") == 0
        assert session.status_store.current("trunk") is Status.CHECK
        assert ledger.total_units(session.scan_store.latest("trunk")) == 20
        assert (dirs / "output" / "trunk-CheckFile.csv").exists()
        assert session.store.groups() == ["trunk"]

    def test_export_command(self, session, dirs, plan_entries):
        session.store.save("trunk", plan_entries)

        assert run(session, "export", "trunk") == 0
        lines = (dirs / "output" / "trunk-CheckFile.csv").read_text().splitlines()
        assert lines[0] == "trunk"
        assert len(lines) == 5

    def test_branch_command(self, session, plan_entries):
        session.store.save("trunk", plan_entries)

        assert run(session, "branch", "trunk", "X001", "X002") == 0

        (branch,) = [g for g in session.store.groups() if g != "trunk"]
        assert ledger.total_units(session.store.load(branch)) == 25
        assert ledger.total_units(session.store.load("trunk")) == 15

    def test_branch_unselected(self, session, plan_entries):
        session.store.save("trunk", plan_entries)
        assert run(session, "branch", "trunk", "X001", "--unselected") == 0
        assert ledger.total_units(session.store.load("trunk")) == 20

    def test_status_commands(self, session, plan_entries):
        session.store.save("trunk", plan_entries)
        assert run(session, "status", "trunk", "--advance") == 0
        assert session.status_store.current("trunk") is Status.CHECK
        assert run(session, "status", "trunk", "--set", "Staged") == 0
        assert session.status_store.current("trunk") is Status.STAGED

    def test_show_lists_groups(self, session, plan_entries):
        session.store.save("trunk", plan_entries)
        session.scan_store.save("trunk", plan_entries[:1])
        assert run(session, "show") == 0
        assert run(session, "show", "trunk") == 0
