"""Tests for the query result model and value formatting."""

import datetime
import json
import math

import pytest

from axiomtui.query.result import (
    FLOAT,
    INT,
    OTHER,
    STRING,
    QueryResult,
    Scalar,
    format_value,
    parse_timestamp,
)

from conftest import entry, interval, make_result


class TestScalar:
    def test_kinds(self):
        assert Scalar.from_json(1.5).kind == FLOAT
        assert Scalar.from_json(3).kind == INT
        assert Scalar.from_json("x").kind == STRING
        assert Scalar.from_json(True).kind == OTHER
        assert Scalar.from_json(None).kind == OTHER
        assert Scalar.from_json([1, 2]).kind == OTHER

    def test_numbers_as_float(self):
        value = Scalar.from_json(3, numbers_as_float=True)
        assert value.kind == FLOAT
        assert value.as_float_or_nan() == 3.0

    def test_booleans_are_not_numbers(self):
        value = Scalar.from_json(True, numbers_as_float=True)
        assert math.isnan(value.as_float_or_nan())

    def test_non_float_projects_to_nan(self):
        assert math.isnan(Scalar.from_json("12").as_float_or_nan())
        assert math.isnan(Scalar.from_json(12).as_float_or_nan())

    def test_infinity_projects_to_nan(self):
        raw = json.loads('[Infinity, -Infinity, NaN]')
        for value in raw:
            scalar = Scalar.from_json(value, numbers_as_float=True)
            assert scalar.kind == FLOAT
            assert math.isnan(scalar.as_float_or_nan())


class TestFormatValue:
    def test_floats_use_natural_form(self):
        assert format_value(3.0) == "3"
        assert format_value(2.5) == "2.5"
        assert format_value(-0.125) == "-0.125"
        assert format_value(1e20) == "1e+20"

    def test_special_floats(self):
        assert format_value(math.nan) == "NaN"
        assert format_value(math.inf) == "+Inf"
        assert format_value(-math.inf) == "-Inf"

    def test_other_types(self):
        assert format_value(42) == "42"
        assert format_value("api") == "api"
        assert format_value(None) == "null"
        assert format_value(True) == "true"
        assert format_value({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_scalar_str_matches_format_value(self):
        assert str(Scalar.from_json(7.0)) == "7"


class TestParseTimestamp:
    def test_nanoseconds_are_trimmed(self):
        ts = parse_timestamp("2024-01-15T12:00:00.123456789Z")
        assert ts == datetime.datetime(2024, 1, 15, 12, 0, 0, 123456, tzinfo=datetime.timezone.utc)

    def test_offset(self):
        ts = parse_timestamp("2024-01-15T12:00:00+0200")
        assert ts.utcoffset() == datetime.timedelta(hours=2)

    def test_unparseable_is_kept(self):
        assert parse_timestamp("yesterday") == "yesterday"

    def test_missing(self):
        assert parse_timestamp(None) is None


class TestQueryResultFromDict:
    def test_decodes_buckets(self):
        result = make_result(
            series=[interval(entry({"svc": "a"}, [("count", 4)]))],
            totals=[entry({"svc": "a"}, [("count", 4)])],
        )
        group = result.buckets.series[0].groups[0]
        assert group.group["svc"] == Scalar(STRING, "a")
        assert group.aggregations[0].alias == "count"
        # Aggregation numbers are doubles on the wire
        assert group.aggregations[0].value == Scalar(FLOAT, 4.0)
        assert result.buckets.totals[0].aggregations[0].alias == "count"

    def test_decodes_matches(self):
        result = QueryResult.from_dict({
            "matches": [{"_time": "2024-01-15T12:00:00Z", "data": {"n": 3, "s": "x"}}],
        })
        match = result.matches[0]
        assert match.data["n"] == Scalar(INT, 3)
        assert match.raw["data"]["s"] == "x"
        assert isinstance(match.time, datetime.datetime)

    def test_missing_sections_are_empty(self):
        result = QueryResult.from_dict({})
        assert result.matches == ()
        assert result.buckets.series == ()
        assert result.buckets.totals == ()

    def test_null_sections_are_empty(self):
        result = QueryResult.from_dict({"matches": None, "buckets": {"series": None}})
        assert result.matches == ()
        assert result.buckets.series == ()

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            QueryResult.from_dict([])
