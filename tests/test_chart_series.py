"""Tests for the price chart view model."""

import random
from datetime import timedelta

from core.models import PricePoint, chronological
from dashboard.chart_series import SERIES_LABEL, format_time, to_chart_series
from tests.test_helpers import BASE_TS


def test_one_point_in_one_point_out_in_order():
    points = [PricePoint(BASE_TS + timedelta(minutes=30 * i), 100.0 + i) for i in range(5)]
    series = to_chart_series(points)
    assert series.values == (100.0, 101.0, 102.0, 103.0, 104.0)
    assert series.labels == tuple(format_time(p) for p in points)
    assert len(series) == 5
    assert series.label == SERIES_LABEL


def test_empty_series():
    series = to_chart_series([])
    assert series.labels == ()
    assert series.values == ()


def test_labels_are_time_of_day():
    label = format_time(PricePoint(BASE_TS, 1.0))
    hh, mm, ss = label.split(":")
    assert len(label) == 8
    assert all(part.isdigit() and len(part) == 2 for part in (hh, mm, ss))


def test_shuffled_input_normalized_then_charted_is_chronological():
    rng = random.Random(7)
    points = [PricePoint(BASE_TS + timedelta(minutes=i), float(i)) for i in range(50)]
    for _ in range(10):
        shuffled = points[:]
        rng.shuffle(shuffled)
        series = to_chart_series(chronological(shuffled))
        assert list(series.values) == sorted(series.values)


def test_duplicate_timestamps_keep_all_points():
    points = [PricePoint(BASE_TS, 1.0), PricePoint(BASE_TS, 2.0)]
    assert to_chart_series(chronological(points)).values == (1.0, 2.0)
