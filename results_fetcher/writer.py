"""CSV rendering of a built report."""

import csv
import logging
from pathlib import Path

from results_fetcher.report import Report

log = logging.getLogger(__name__)

DETAILED_FILE_NAME = "DetailedTestSuiteOutcome.csv"
GENERAL_FILE_NAME = "GeneralTestSuiteOutcome.csv"

DETAILED_HEADER = (
    "TestSuiteId",
    "TestSuiteName",
    "TestCaseId",
    "Outcome",
    "Duration",
    "LastRunDate",
)
GENERAL_HEADER = (
    "SuiteName",
    "SuiteId",
    "TotalTests",
    "TotalPassedTests",
    "TotalFailedTests",
    "TotalUnspecifiedTests",
    "SuiteDuration",
    "PassRate",
)
OVERALL_HEADER = (
    "TotalTests",
    "TotalPassedTests",
    "TotalFailedTests",
    "TotalUnspecifiedTests",
    "OverallPassRate",
    "OverallDuration",
)


def write_detailed_csv(report: Report, path: Path) -> None:
    """Write one row per test case, suites separated by a blank line."""
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(DETAILED_HEADER)
        writer.writerow([])
        for rows in report.details:
            for row in rows:
                writer.writerow(
                    (
                        row.suite_id,
                        row.suite_name,
                        row.test_case_id,
                        row.outcome,
                        row.duration,
                        row.last_run_date,
                    )
                )
            writer.writerow([])


def write_general_csv(report: Report, path: Path) -> None:
    """Write one row per suite followed by the overall summary."""
    with path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(GENERAL_HEADER)
        writer.writerow([])
        for summary in report.summaries:
            writer.writerow(
                (
                    summary.suite_name,
                    summary.suite_id,
                    summary.total,
                    summary.passed,
                    summary.failed,
                    summary.unspecified,
                    summary.duration_minutes,
                    f"{summary.pass_rate}%",
                )
            )
        writer.writerow([])
        writer.writerow(OVERALL_HEADER)
        overall = report.overall
        writer.writerow(
            (
                overall.total,
                overall.passed,
                overall.failed,
                overall.unspecified,
                f"{overall.pass_rate}%",
                overall.duration_minutes,
            )
        )


def write_reports(report: Report, output_directory: Path) -> tuple[Path, Path]:
    """Write the detailed and general CSV files.

    Returns:
        Paths of the detailed and the general file

    """
    output_directory.mkdir(parents=True, exist_ok=True)
    detailed_path = output_directory / DETAILED_FILE_NAME
    general_path = output_directory / GENERAL_FILE_NAME

    write_detailed_csv(report, detailed_path)
    write_general_csv(report, general_path)

    log.info("Wrote %s and %s", detailed_path, general_path)
    return detailed_path, general_path
