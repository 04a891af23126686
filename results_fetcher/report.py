"""Detail rows and summaries computed from aggregated suite results."""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from results_fetcher.aggregator import SuiteResults
from results_fetcher.config import MissingDurationPolicy
from results_fetcher.errors import MissingDurationError
from results_fetcher.models.test_point import TestPointResult

PASSED = "passed"
FAILED = "failed"
UNSPECIFIED = "unspecified"

DATE_FORMAT = "%m/%d/%Y %H:%M:%S"


@dataclass(frozen=True, kw_only=True)
class DetailRow:
    """One test case of one suite."""

    suite_id: int
    suite_name: str
    test_case_id: int
    outcome: str
    duration: str
    last_run_date: str


@dataclass(frozen=True, kw_only=True)
class SuiteSummary:
    """Outcome counts and duration of one suite."""

    suite_name: str
    suite_id: int
    total: int
    passed: int
    failed: int
    unspecified: int
    duration_ms: float
    duration_minutes: int
    pass_rate: int


@dataclass(frozen=True, kw_only=True)
class OverallSummary:
    """Outcome counts and duration across all suites."""

    total: int
    passed: int
    failed: int
    unspecified: int
    duration_ms: float
    duration_minutes: int
    pass_rate: int


@dataclass(frozen=True, kw_only=True)
class Report:
    """Everything the report writer renders."""

    details: Sequence[Sequence[DetailRow]]
    summaries: Sequence[SuiteSummary]
    overall: OverallSummary


def pass_rate(passed: int, total: int) -> int:
    """Integer percentage of passed tests, 0 when there are no tests."""
    if total == 0:
        return 0
    return passed * 100 // total


def format_duration(milliseconds: float) -> str:
    """Format a duration as ``MM:SS``, dropping fractions of a second."""
    minutes, seconds = divmod(int(milliseconds // 1000), 60)
    return f"{minutes:02d}:{seconds:02d}"


def whole_minutes(milliseconds: float) -> int:
    """Round a duration to whole minutes, halves away from zero."""
    return math.floor(milliseconds / 60_000 + 0.5)


def format_date(value: datetime | None) -> str:
    """Format a completion date, empty for points that never ran."""
    # never run points carry 0001-01-01T00:00:00
    if value is None or value.year == 1:
        return ""
    return value.strftime(DATE_FORMAT)


def _duration_of(
    result: TestPointResult, suite_id: int, missing_duration: MissingDurationPolicy
) -> float | None:
    if result.duration is None and missing_duration == "fail":
        raise MissingDurationError(
            f"Test case {result.test_case_id} of suite {suite_id} "
            "has no last run duration"
        )
    return result.duration


def _count(results: Sequence[TestPointResult], outcome: str) -> int:
    return sum(1 for result in results if result.outcome.lower() == outcome)


def build_detail_rows(
    suite_results: SuiteResults, missing_duration: MissingDurationPolicy = "fail"
) -> list[DetailRow]:
    """Build one detail row per test case of a suite."""
    suite = suite_results.suite
    rows: list[DetailRow] = []
    for result in suite_results.results:
        duration = _duration_of(result, suite.id, missing_duration)
        rows.append(
            DetailRow(
                suite_id=suite.id,
                suite_name=suite.name,
                test_case_id=result.test_case_id,
                outcome=result.outcome,
                duration=format_duration(duration) if duration is not None else "",
                last_run_date=format_date(result.date_completed),
            )
        )
    return rows


def summarize_suite(
    suite_results: SuiteResults, missing_duration: MissingDurationPolicy = "fail"
) -> SuiteSummary:
    """Count outcomes and sum durations of a suite.

    Durations are summed in milliseconds and converted to minutes once.
    """
    suite = suite_results.suite
    results = suite_results.results
    duration_ms = 0.0
    for result in results:
        if (duration := _duration_of(result, suite.id, missing_duration)) is not None:
            duration_ms += duration

    passed = _count(results, PASSED)
    return SuiteSummary(
        suite_name=suite.name,
        suite_id=suite.id,
        total=len(results),
        passed=passed,
        failed=_count(results, FAILED),
        unspecified=_count(results, UNSPECIFIED),
        duration_ms=duration_ms,
        duration_minutes=whole_minutes(duration_ms),
        pass_rate=pass_rate(passed, len(results)),
    )


def summarize_overall(summaries: Sequence[SuiteSummary]) -> OverallSummary:
    """Combine suite summaries into one summary of the whole run."""
    total = sum(summary.total for summary in summaries)
    passed = sum(summary.passed for summary in summaries)
    duration_ms = sum(summary.duration_ms for summary in summaries)
    return OverallSummary(
        total=total,
        passed=passed,
        failed=sum(summary.failed for summary in summaries),
        unspecified=sum(summary.unspecified for summary in summaries),
        duration_ms=duration_ms,
        duration_minutes=whole_minutes(duration_ms),
        pass_rate=pass_rate(passed, total),
    )


def build_report(
    suite_results: Sequence[SuiteResults],
    missing_duration: MissingDurationPolicy = "fail",
) -> Report:
    """Build detail rows, suite summaries and the overall summary.

    Args:
        suite_results: Aggregated results of every configured suite
        missing_duration: What to do with test cases without a last run
            duration: ``"fail"`` raises, ``"exclude"`` leaves them out of
            duration totals

    Raises:
        MissingDurationError: If a duration is missing under the fail policy

    """
    summaries = [summarize_suite(item, missing_duration) for item in suite_results]
    return Report(
        details=[build_detail_rows(item, missing_duration) for item in suite_results],
        summaries=summaries,
        overall=summarize_overall(summaries),
    )
