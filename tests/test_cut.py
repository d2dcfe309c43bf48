"""Tests for the select-filter compiler."""

import pytest

from silencecut.analyzers.intervals import normalize_intervals, validate_intervals
from silencecut.editors.cut import build_filters, compile_predicate
from silencecut.errors import EmptySilenceList
from silencecut.models import Interval


class TestCompilePredicate:
    def test_two_intervals(self):
        predicate = compile_predicate([Interval(1.0, 2.0), Interval(4.5, 5.0)])
        assert predicate == "between(t,1.0,2.0)+between(t,4.5,5.0)"

    def test_single_interval_has_no_trailing_operator(self):
        assert compile_predicate([Interval(0.25, 0.75)]) == "between(t,0.25,0.75)"

    def test_values_are_not_rounded(self):
        predicate = compile_predicate([Interval(1.23456789, 2.000001)])
        assert predicate == "between(t,1.23456789,2.000001)"

    def test_integers_render_as_floats(self):
        assert compile_predicate([Interval(1, 2)]) == "between(t,1.0,2.0)"

    def test_many_intervals_are_not_truncated(self):
        intervals = [Interval(k, k + 0.5) for k in range(2000)]
        predicate = compile_predicate(intervals)
        assert predicate.count("between(") == 2000
        assert predicate.endswith("between(t,1999.0,1999.5)")

    def test_empty_raises(self):
        with pytest.raises(EmptySilenceList):
            compile_predicate([])


class TestBuildFilters:
    def test_audio_and_video_share_predicate(self):
        filters = build_filters([Interval(1.0, 2.0), Interval(4.5, 5.0)])
        keep = "not(between(t,1.0,2.0)+between(t,4.5,5.0))"
        assert filters.audio == f"aselect='{keep}',asetpts=N/SR/TB"
        assert filters.video == f"select='{keep}',setpts=N/FRAME_RATE/TB"

    def test_overlapping_input_compiles_merged(self):
        intervals = normalize_intervals(
            validate_intervals([{"start": 1, "end": 3}, {"start": 2, "end": 4}])
        )
        filters = build_filters(intervals)
        assert "between(t,1.0,4.0)" in filters.audio
        assert filters.audio.count("between(") == 1
        assert filters.video.count("between(") == 1

    def test_deterministic(self):
        intervals = [Interval(0.5, 1.5), Interval(3.0, 3.3)]
        assert build_filters(intervals) == build_filters(list(intervals))
