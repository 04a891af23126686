"""CLI entry point for fetching test suite results."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from results_fetcher.aggregator import SuiteAggregator
from results_fetcher.client.azure_devops import AzureDevOpsClient
from results_fetcher.config import MissingDurationPolicy, load_config
from results_fetcher.errors import ResultsFetcherError
from results_fetcher.report import Report, build_report
from results_fetcher.writer import write_reports


def log_report_summary(log: logging.Logger, report: Report) -> None:
    """Log per-suite and overall outcome counts."""
    log.info("=" * 80)
    log.info("Test Suite Results Summary:")
    log.info("=" * 80)

    for summary in report.summaries:
        log.info(
            "%s (%d): %d passed, %d failed, %d unspecified of %d, "
            "pass rate %d%%, %d min",
            summary.suite_name,
            summary.suite_id,
            summary.passed,
            summary.failed,
            summary.unspecified,
            summary.total,
            summary.pass_rate,
            summary.duration_minutes,
        )

    overall = report.overall
    log.info(
        "Overall: %d passed, %d failed, %d unspecified of %d, "
        "pass rate %d%%, %d min",
        overall.passed,
        overall.failed,
        overall.unspecified,
        overall.total,
        overall.pass_rate,
        overall.duration_minutes,
    )


async def run(
    config_path: Path,
    output_directory: Path | None = None,
    concurrent: bool = False,
    max_pages: int | None = None,
    missing_duration: MissingDurationPolicy | None = None,
) -> int:
    """Fetch results of all configured suites and write the reports.

    Report files are only written once every suite has been fetched and the
    report was built; any failure before that leaves no file behind.
    """
    log = logging.getLogger("results_fetcher")

    config = load_config(
        config_path,
        output_directory=output_directory,
        max_pages=max_pages,
        missing_duration=missing_duration,
    )

    log.info(
        "Fetching %d suite(s) of test plan %d...",
        len(config.suites),
        config.test_plan_id,
    )

    async with AzureDevOpsClient.from_config(config) as client:
        aggregator = SuiteAggregator(
            fetcher=client,
            test_plan_id=config.test_plan_id,
            configuration_id=config.configuration_id,
            max_pages=config.max_pages,
        )
        suite_results = await aggregator.aggregate_suites(
            config.suites, concurrent=concurrent
        )

    report = build_report(suite_results, config.missing_duration)
    log_report_summary(log, report)

    write_reports(report, config.output_directory)
    return 0


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Fetch Azure DevOps test suite results into CSV reports"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("appsettings.json"),
        help="Path to the settings file (default: appsettings.json)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the CSV reports, overrides the settings file",
    )
    parser.add_argument(
        "--concurrent",
        action="store_true",
        help="Fetch suites concurrently instead of one after the other",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Abort when a suite returns more pages than this",
    )
    parser.add_argument(
        "--missing-duration",
        choices=["fail", "exclude"],
        default=None,
        help="How to handle test cases without a last run duration",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        exit_code = asyncio.run(
            run(
                config_path=args.config,
                output_directory=args.output_dir,
                concurrent=args.concurrent,
                max_pages=args.max_pages,
                missing_duration=args.missing_duration,
            )
        )
    except ResultsFetcherError as exc:
        logging.getLogger("results_fetcher").error("Fetch aborted: %s", exc)
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
