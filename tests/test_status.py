import json

from shipplan.status import INITIAL_STATUS, Status, StatusRecord, StatusStore


class TestStatus:

    def test_stage_order(self):
        assert [s.value for s in Status] == [
            "Open", "Check", "Confirm", "Measure", "BoxContents", "CaseLabel", "Staged", "Shipped",
        ]

    def test_next(self):
        assert Status.OPEN.next() is Status.CHECK
        assert Status.STAGED.next() is Status.SHIPPED

    def test_shipped_is_terminal(self):
        assert Status.SHIPPED.is_terminal
        assert Status.SHIPPED.next() is Status.SHIPPED
        assert not Status.OPEN.is_terminal

    def test_initial_status(self):
        assert INITIAL_STATUS is Status.OPEN


class TestStatusStore:

    def test_unknown_group_is_open(self, tmp_path):
        assert StatusStore(tmp_path).current("nothing-here") is Status.OPEN

    def test_mark_writes_a_new_file_each_time(self, tmp_path):
        store = StatusStore(tmp_path)
        first = store.mark("trunk", Status.CHECK)
        second = store.mark("trunk", Status.CHECK)

        assert first != second
        assert first.name.startswith("trunk_") and first.suffix == ".json"
        assert json.loads(first.read_text()) == "Check"

    def test_latest_mark_wins(self, tmp_path):
        store = StatusStore(tmp_path)
        for status in (Status.OPEN, Status.CHECK, Status.CONFIRM, Status.CHECK):
            store.mark("trunk", status)
        assert store.current("trunk") is Status.CHECK
        assert store.history("trunk") == [Status.OPEN, Status.CHECK, Status.CONFIRM, Status.CHECK]

    def test_groups_do_not_mix(self, tmp_path):
        store = StatusStore(tmp_path)
        store.mark("trunk", Status.STAGED)
        store.mark("trunk-east", Status.SHIPPED)
        assert store.current("trunk") is Status.STAGED

    def test_mark_for_check(self, tmp_path):
        store = StatusStore(tmp_path)
        store.mark_for_check("trunk")
        assert store.record("trunk") == StatusRecord(group="trunk", status=Status.CHECK)
