"""Paginated retrieval of test points per suite."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from results_fetcher.client.base import PageFetcher
from results_fetcher.errors import PageLimitExceededError
from results_fetcher.models.suite import Suite
from results_fetcher.models.test_point import TestPointResult

log = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class SuiteResults:
    """Filtered and sorted test points of one suite."""

    suite: Suite
    results: Sequence[TestPointResult]


@dataclass(frozen=True, kw_only=True)
class SuiteAggregator:
    """Collects all pages of test points of a suite and filters them.

    The configuration ID is applied identically to every suite. Pagination
    only stops once the service returns no continuation token; ``max_pages``
    adds an optional ceiling on top of that.
    """

    fetcher: PageFetcher
    test_plan_id: int
    configuration_id: int
    max_pages: int | None = None

    async def collect(self, suite_id: int) -> list[TestPointResult]:
        """Fetch every page of a suite and concatenate them in arrival order.

        Raises:
            PageLimitExceededError: If ``max_pages`` is set and the service
                still returns a continuation token after that many pages

        """
        results: list[TestPointResult] = []
        continuation_token = ""
        pages = 0

        while True:
            page = await self.fetcher.fetch_page(
                self.test_plan_id, suite_id, continuation_token
            )
            pages += 1
            results.extend(page.results)
            continuation_token = page.continuation_token

            if not continuation_token:
                break

            if self.max_pages is not None and pages >= self.max_pages:
                raise PageLimitExceededError(
                    f"Suite {suite_id} still has more pages after {pages} page(s)"
                )

        log.info(
            "Collected %d test point(s) for suite %d in %d page(s)",
            len(results),
            suite_id,
            pages,
        )
        return results

    async def aggregate(self, suite_id: int) -> list[TestPointResult]:
        """Collect a suite and keep the points of the configured configuration.

        Returns:
            Matching test points sorted by outcome; the sort is stable so
            equal outcomes keep their page arrival order

        """
        results = await self.collect(suite_id)
        matching = [
            result
            for result in results
            if result.configuration_id == self.configuration_id
        ]
        log.info(
            "Suite %d: %d of %d test point(s) match configuration %d",
            suite_id,
            len(matching),
            len(results),
            self.configuration_id,
        )
        return sorted(matching, key=lambda result: result.outcome)

    async def aggregate_suites(
        self, suites: Sequence[Suite], *, concurrent: bool = False
    ) -> list[SuiteResults]:
        """Aggregate several suites, preserving their order.

        Suites are fetched one after the other unless ``concurrent`` is set.
        The first failure is raised unchanged and no results are returned.
        """
        if not concurrent:
            return [
                SuiteResults(suite=suite, results=await self.aggregate(suite.id))
                for suite in suites
            ]

        tasks = [asyncio.ensure_future(self.aggregate(suite.id)) for suite in suites]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return [
            SuiteResults(suite=suite, results=suite_results)
            for suite, suite_results in zip(suites, results, strict=True)
        ]
