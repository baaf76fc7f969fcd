import pytest

from shipplan.schemas import Entry
from shipplan.session import PlanSession
from shipplan.status import StatusStore
from shipplan.storage import PlanStore


def make_entry(fnsku="X001", units=1, case_id="c1", **fields) -> Entry:
    return Entry(fnsku=fnsku, units=units, id=case_id, **fields)


@pytest.fixture
def store(tmp_path):
    return PlanStore(tmp_path / "plans")


@pytest.fixture
def status_store(tmp_path):
    return StatusStore(tmp_path / "status")


@pytest.fixture
def session(store, status_store, tmp_path):
    return PlanSession(store=store, status_store=status_store, scan_store=PlanStore(tmp_path / "scans"))


@pytest.fixture
def plan_entries():
    """A 40 unit plan: X001 in two cases of 10, X002 in one case of 5, X003 loose 15."""
    return [
        make_entry("X001", 10, "c1", upc="111"),
        make_entry("X001", 10, "c2", upc="111"),
        make_entry("X002", 5, "c3", upc="222"),
        make_entry("X003", 15, "staging-a", upc="333"),
    ]
