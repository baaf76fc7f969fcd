import json

import pytest
from pydantic import ValidationError

from shipplan import data_handler, settings
from shipplan.schemas import Entry, ScanLine, round_dimensions


class TestEntry:

    def test_requires_fnsku(self):
        with pytest.raises(ValidationError):
            Entry(fnsku="", units=1, id="c1")

    def test_units_limited_to_32_bits(self):
        with pytest.raises(ValidationError):
            Entry(fnsku="X", units=settings.I32_MAX + 1, id="c1")

    def test_negative_units_allowed(self):
        assert Entry(fnsku="X", units=-4, id="c1").units == -4

    def test_set_dimensions_rounds_descending(self):
        entry = Entry(fnsku="X", units=1, id="c1")
        entry.set_dimensions([10.2, 20.9, 4.0])
        assert entry.case_dimensions == (21.0, 11.0, 4.0)

    def test_loaded_dimensions_are_kept(self):
        entry = Entry(fnsku="X", units=1, id="c1", dimensions=[3.5, 9.0, 1.0])
        assert entry.dimensions == (3.5, 9.0, 1.0)

    def test_round_dimensions_needs_three_sides(self):
        with pytest.raises(ValueError):
            round_dimensions([1.0, 2.0])


class TestSerialization:

    def test_json_layout(self):
        entry = Entry(fnsku="X001", units=-3, id="c1", upc="0123", total_pounds=12.5)
        entry.set_dimensions([12, 10, 8])
        (record,) = json.loads(data_handler.serialize([entry]))
        assert list(record) == [
            "amz_size", "fnsku", "msku", "title", "asin", "condition",
            "units", "total_pounds", "id", "upc", "dimensions", "amz_dimensions",
        ]
        assert record["units"] == -3
        assert record["dimensions"] == [12.0, 10.0, 8.0]
        assert record["amz_dimensions"] is None

    def test_deserialize(self):
        text = json.dumps([{
            "amz_size": None, "fnsku": "X001", "msku": None, "title": None,
            "asin": None, "condition": None, "units": 7, "total_pounds": None,
            "id": "c9", "upc": "0123", "dimensions": None, "amz_dimensions": [1, 2, 3],
        }])
        (entry,) = data_handler.deserialize(text)
        assert entry.units == 7
        assert entry.upc == "0123"
        assert entry.amz_dimensions == (1.0, 2.0, 3.0)

    def test_serialize_then_load_keeps_entries(self, plan_entries):
        loaded = data_handler.deserialize(data_handler.serialize(plan_entries))
        assert loaded == plan_entries


class TestScanLine:

    def test_accepts_sheet_headers(self):
        line = ScanLine.model_validate(
            {"FNSKU": "X001", "UPC": "111", "Units Per Case": "5", "Cases": "2"}
        )
        assert line.total_units == 10

    def test_blank_fnsku_rejected(self):
        with pytest.raises(ValidationError):
            ScanLine(fnsku="   ", units_per_case=1, cases=1)
