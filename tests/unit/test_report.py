"""Tests for report building."""

from datetime import datetime

import pytest

from results_fetcher.aggregator import SuiteResults
from results_fetcher.errors import MissingDurationError
from results_fetcher.models.suite import Suite
from results_fetcher.report import (
    build_detail_rows,
    build_report,
    format_date,
    format_duration,
    pass_rate,
    summarize_overall,
    summarize_suite,
    whole_minutes,
)
from results_fetcher.testing.factories import SuiteFactory, build_point


@pytest.fixture
def suite_a() -> SuiteResults:
    """Suite with two passed and one failed test case."""
    return SuiteResults(
        suite=Suite(id=11, name="Smoke Tests"),
        results=[
            build_point(test_case_id=1, outcome="failed", duration=30000),
            build_point(test_case_id=2, outcome="passed", duration=60000),
            build_point(test_case_id=3, outcome="passed", duration=35000),
        ],
    )


@pytest.fixture
def suite_b() -> SuiteResults:
    """Suite with a single unspecified test case."""
    return SuiteResults(
        suite=Suite(id=12, name="Regression Tests"),
        results=[build_point(test_case_id=4, outcome="unspecified", duration=0)],
    )


class TestPassRate:
    """Tests for pass_rate."""

    def test_floors_percentage(self) -> None:
        """Two of three passed is 66 percent."""
        assert pass_rate(2, 3) == 66

    def test_zero_total_is_zero(self) -> None:
        """No tests yields a rate of zero instead of dividing by zero."""
        assert pass_rate(0, 0) == 0

    def test_all_passed(self) -> None:
        """All passed is 100 percent."""
        assert pass_rate(4, 4) == 100


class TestDurationFormatting:
    """Tests for duration and date formatting."""

    def test_format_duration_minutes_seconds(self) -> None:
        """65 seconds renders as 01:05."""
        assert format_duration(65000) == "01:05"

    def test_format_duration_truncates_fractions(self) -> None:
        """Fractions of a second are dropped."""
        assert format_duration(65999.9) == "01:05"

    def test_format_duration_zero(self) -> None:
        """Zero renders as 00:00."""
        assert format_duration(0) == "00:00"

    def test_format_duration_over_an_hour_keeps_total_minutes(self) -> None:
        """Durations over an hour are not wrapped."""
        assert format_duration(3_725_000) == "62:05"

    def test_whole_minutes_rounds(self) -> None:
        """125 seconds rounds to 2 minutes."""
        assert whole_minutes(125000) == 2

    def test_whole_minutes_rounds_half_up(self) -> None:
        """Half a minute rounds up."""
        assert whole_minutes(90000) == 2
        assert whole_minutes(150000) == 3

    def test_format_date(self) -> None:
        """Dates render month first with a 24 hour clock."""
        assert format_date(datetime(2099, 1, 2, 15, 4, 5)) == "01/02/2099 15:04:05"

    def test_format_missing_date(self) -> None:
        """Missing dates render empty."""
        assert format_date(None) == ""

    def test_format_never_run_date(self) -> None:
        """The date of points that never ran renders empty."""
        point = build_point(date_completed="0001-01-01T00:00:00")

        assert format_date(point.date_completed) == ""


class TestDetailRows:
    """Tests for build_detail_rows."""

    def test_one_row_per_test_case(self, suite_a: SuiteResults) -> None:
        """Builds a row per test case carrying suite identity."""
        rows = build_detail_rows(suite_a)

        assert [row.test_case_id for row in rows] == [1, 2, 3]
        assert {row.suite_id for row in rows} == {11}
        assert {row.suite_name for row in rows} == {"Smoke Tests"}
        assert rows[1].duration == "01:00"
        assert rows[1].last_run_date == "01/01/2099 12:00:00"

    def test_missing_duration_fails_by_default(self) -> None:
        """A test case without duration aborts under the fail policy."""
        suite_results = SuiteResults(
            suite=SuiteFactory.build(),
            results=[build_point(duration=None)],
        )

        with pytest.raises(MissingDurationError):
            build_detail_rows(suite_results)

    def test_missing_duration_excluded(self) -> None:
        """A test case without duration renders empty under the exclude policy."""
        suite_results = SuiteResults(
            suite=SuiteFactory.build(),
            results=[build_point(duration=None, date_completed=None)],
        )

        rows = build_detail_rows(suite_results, "exclude")

        assert rows[0].duration == ""
        assert rows[0].last_run_date == ""


class TestSummaries:
    """Tests for suite and overall summaries."""

    def test_suite_summary_counts(self, suite_a: SuiteResults) -> None:
        """Counts outcomes and computes pass rate and minutes."""
        summary = summarize_suite(suite_a)

        assert summary.suite_id == 11
        assert summary.suite_name == "Smoke Tests"
        assert summary.total == 3
        assert summary.passed == 2
        assert summary.failed == 1
        assert summary.unspecified == 0
        assert summary.duration_ms == 125000
        assert summary.duration_minutes == 2
        assert summary.pass_rate == 66

    def test_outcomes_compared_case_insensitively(self) -> None:
        """Outcome casing does not affect counts."""
        suite_results = SuiteResults(
            suite=SuiteFactory.build(),
            results=[
                build_point(outcome="Passed"),
                build_point(outcome="Failed"),
                build_point(outcome="Unspecified"),
                build_point(outcome="blocked"),
            ],
        )

        summary = summarize_suite(suite_results)

        assert (summary.passed, summary.failed, summary.unspecified) == (1, 1, 1)
        assert summary.total == 4
        assert summary.pass_rate == 25

    def test_empty_suite_has_zero_pass_rate(self) -> None:
        """A suite without matching test cases does not divide by zero."""
        summary = summarize_suite(SuiteResults(suite=SuiteFactory.build(), results=[]))

        assert summary.total == 0
        assert summary.pass_rate == 0
        assert summary.duration_minutes == 0

    def test_duration_summed_before_rounding(self) -> None:
        """Minutes are computed from the summed milliseconds."""
        suite_results = SuiteResults(
            suite=SuiteFactory.build(),
            results=[build_point(duration=20000) for _ in range(3)],
        )

        summary = summarize_suite(suite_results)

        assert summary.duration_minutes == 1

    def test_excluded_durations_still_counted(self) -> None:
        """Excluded test cases count but add no duration."""
        suite_results = SuiteResults(
            suite=SuiteFactory.build(),
            results=[build_point(duration=None), build_point(duration=120000)],
        )

        summary = summarize_suite(suite_results, "exclude")

        assert summary.total == 2
        assert summary.duration_ms == 120000

    def test_overall_with_empty_suites(self) -> None:
        """Overall pass rate over no tests is zero."""
        overall = summarize_overall([])

        assert overall.total == 0
        assert overall.pass_rate == 0


def test_build_report_two_suites(suite_a: SuiteResults, suite_b: SuiteResults) -> None:
    """Builds details, suite summaries and overall totals."""
    report = build_report([suite_a, suite_b])

    assert sum(len(rows) for rows in report.details) == 4
    assert len(report.summaries) == 2
    assert report.summaries[1].unspecified == 1
    assert report.summaries[1].pass_rate == 0
    overall = report.overall
    assert overall.total == 4
    assert overall.passed == 2
    assert overall.failed == 1
    assert overall.unspecified == 1
    assert overall.pass_rate == 50
    assert overall.duration_minutes == 2


def test_build_report_missing_duration_fails(suite_a: SuiteResults) -> None:
    """A missing duration anywhere aborts the report under the fail policy."""
    broken = SuiteResults(
        suite=Suite(id=13, name="Manual Tests"),
        results=[build_point(duration=None)],
    )

    with pytest.raises(MissingDurationError, match="suite 13"):
        build_report([suite_a, broken])
