import pandas as pd
import requests

from shipplan import data_handler
from shipplan.check import Warn, WarnKind

from conftest import make_entry


class TestCheckFile:

    def test_layout(self, tmp_path, plan_entries):
        plan_entries[0].asin = "B000TEST"
        plan_entries[0].title = "Speaker, black"
        path = data_handler.write_check_file(plan_entries, "trunk", tmp_path)

        assert path.name == "trunk-CheckFile.csv"
        lines = path.read_text().splitlines()
        assert lines[0] == "trunk"
        assert lines[1] == '"ASIN","TITLE","UNITS","SIZE","FNSKU","UPC","COUNT","NOTES"'

        df = pd.read_csv(path, skiprows=1, dtype=str, keep_default_na=False)
        assert list(df["FNSKU"]) == ["X001", "X002", "X003"]
        assert list(df["UNITS"]) == ["20", "5", "15"]
        assert df.loc[0, "TITLE"] == "Speaker, black"
        assert df.loc[1, "ASIN"] == ""

    def test_negated_skus_show_net_units(self, tmp_path, plan_entries):
        entries = plan_entries + [make_entry("X002", -5, "c3")]
        df = data_handler.check_file_frame(entries)
        assert list(df["UNITS"]) == [20, 0, 15]


class FakeResponse:
    def __init__(self, status_code=200):
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")


class TestWebhook:

    def test_skipped_without_url(self, monkeypatch):
        monkeypatch.setattr(data_handler.settings, "WEBHOOK_URL", None)
        assert data_handler.post_to_webhook("trunk", "Check", []) is False

    def test_posts_report(self, monkeypatch):
        calls = []

        def fake_post(url, json=None, timeout=None):
            calls.append((url, json))
            return FakeResponse()

        monkeypatch.setattr(data_handler.requests, "post", fake_post)
        warning = Warn(kind=WarnKind.TEAM_LIFT, entries=[make_entry(units=1, total_pounds=50.0)])

        assert data_handler.post_to_webhook("trunk", "Check", [warning], url="http://hook") is True
        url, payload = calls[0]
        assert url == "http://hook"
        assert payload["group"] == "trunk"
        assert payload["status"] == "Check"
        assert payload["warnings"][0]["kind"] == "TeamLift"
        assert payload["warnings"][0]["entries"][0]["total_pounds"] == 50.0

    def test_http_error_is_logged_not_raised(self, monkeypatch):
        monkeypatch.setattr(data_handler.requests, "post", lambda *a, **k: FakeResponse(500))
        assert data_handler.post_to_webhook("trunk", "Check", [], url="http://hook") is False
