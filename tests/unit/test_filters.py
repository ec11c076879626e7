"""Unit tests for timeframe filtering, deduplication and result assembly"""
from chronotheus.api.schemas import Series
from chronotheus.api.series import assemble_result, dedupe_series, filter_by_timeframe


def instant(labels, value="1"):
    return Series(metric=labels, value=(100, value))


def windowed(values):
    """One series per default window, all with job="a"."""
    timeframes = ["current", "7days", "14days", "21days", "28days"]
    return [instant({"job": "a", "chrono_timeframe": tf}, v) for tf, v in zip(timeframes, values)]


class TestFilterByTimeframe:
    """Test timeframe filter"""

    def test_keeps_matching_timeframe(self):
        data = [instant({"chrono_timeframe": "current"}), instant({"chrono_timeframe": "7days"})]
        out = filter_by_timeframe(data, "7days")
        assert len(out) == 1
        assert out[0].metric["chrono_timeframe"] == "7days"

    def test_unknown_timeframe_yields_empty(self):
        data = [instant({"chrono_timeframe": "current"})]
        assert filter_by_timeframe(data, "99days") == []

    def test_empty_selector_is_identity(self):
        data = [instant({"chrono_timeframe": "current"}), instant({"job": "a"})]
        assert filter_by_timeframe(data, "") == data

    def test_series_without_timeframe_label_dropped(self):
        assert filter_by_timeframe([instant({"job": "a"})], "current") == []


class TestDedupeSeries:
    """Test exact-duplicate removal"""

    def test_collapses_identical_label_maps(self):
        first = instant({"a": "1"}, "1")
        duplicate = instant({"a": "1"}, "999")
        other = instant({"a": "2"}, "1")

        out = dedupe_series([first, duplicate, other])

        assert out == [first, other]

    def test_label_order_does_not_matter(self):
        out = dedupe_series([instant({"a": "1", "b": "2"}), instant({"b": "2", "a": "1"})])
        assert len(out) == 1

    def test_idempotent_and_order_preserving(self):
        data = [instant({"a": "3"}), instant({"a": "1"}), instant({"a": "3"}), instant({"a": "2"})]
        once = dedupe_series(data)
        assert dedupe_series(once) == once
        assert [s.metric["a"] for s in once] == ["3", "1", "2"]


class TestAssembleResult:
    """Test the merge policy across commands"""

    def test_no_command_adds_averages(self):
        """Identical average label-maps collapse to the first one"""
        result = assemble_result(windowed(["1", "2", "3", "4", "5"]), "", "")

        assert len(result) == 6
        assert result[5].metric["chrono_timeframe"] == "lastMonthAverage"
        assert result[5].value[1] == "1.000"

    def test_compare_command_adds_one_joined_series(self):
        result = assemble_result(windowed(["1", "2", "3", "4", "5"]), "", "compareAgainstLast28")

        assert len(result) == 6
        compare = result[-1]
        assert compare.metric == {"job": "a", "chrono_timeframe": "compareAgainstLast28"}
        assert compare.value[1] == "0.000"

    def test_unknown_command_returns_raw_only(self):
        raw = windowed(["1", "2", "3", "4", "5"])
        assert assemble_result(raw, "", "somethingElse") == raw

    def test_timeframe_filter_applied_last(self):
        result = assemble_result(windowed(["1", "2", "3", "4", "5"]), "lastMonthAverage", "")
        assert len(result) == 1
        assert result[0].metric["chrono_timeframe"] == "lastMonthAverage"
