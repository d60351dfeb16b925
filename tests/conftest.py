"""Shared builders for query results used across the test suite."""

import math

import pytest

from axiomtui.query.result import QueryResult


def entry(group, aggregations):
    """Wire-format entry group: aggregations is a list of (alias, value)."""
    return {
        "group": dict(group),
        "aggregations": [{"op": alias, "value": value} for alias, value in aggregations],
    }


def interval(*groups):
    return {"startTime": "2024-01-15T12:00:00Z", "endTime": "2024-01-15T12:01:00Z",
            "groups": list(groups)}


def make_result(series=(), totals=(), matches=()):
    return QueryResult.from_dict({
        "matches": list(matches),
        "buckets": {"series": list(series), "totals": list(totals)},
    })


def nan_to_none(rows):
    """Make float matrices comparable with ==."""
    return [[None if math.isnan(v) else v for v in row] for row in rows]


@pytest.fixture
def empty_result():
    return make_result()


@pytest.fixture
def single_group_result():
    # Three intervals, one group {svc: a}, op "count" = 1, 2, 3
    return make_result(
        series=[
            interval(entry({"svc": "a"}, [("count", 1)])),
            interval(entry({"svc": "a"}, [("count", 2)])),
            interval(entry({"svc": "a"}, [("count", 3)])),
        ],
        totals=[entry({"svc": "a"}, [("count", 6)])],
    )


@pytest.fixture
def two_group_result():
    # Interval 1 is missing group b
    return make_result(
        series=[
            interval(
                entry({"svc": "a"}, [("avg", 10.0)]),
                entry({"svc": "b"}, [("avg", 20.0)]),
            ),
            interval(entry({"svc": "a"}, [("avg", 15.0)])),
        ],
        totals=[
            entry({"svc": "a"}, [("avg", 12.5)]),
            entry({"svc": "b"}, [("avg", 20.0)]),
        ],
    )


@pytest.fixture
def matches_result():
    return make_result(matches=[
        {"_time": "2024-01-15T12:00:00.123456789Z", "_rowId": "r1",
         "data": {"status": 200, "path": "/a", "latency": 1.5}},
        {"_time": "2024-01-15T12:00:01Z", "_rowId": "r2",
         "data": {"status": 500, "path": "/b"}},
        {"_time": "2024-01-15T12:00:02Z", "_rowId": "r3",
         "data": {"status": 404, "path": "/c", "latency": 3.0}},
    ])
