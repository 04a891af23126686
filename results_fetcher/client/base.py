"""Abstract base class for test point page fetchers."""

from abc import ABC, abstractmethod

from results_fetcher.models.test_point import TestPointPage


class PageFetcher(ABC):
    """Fetches one page of test points for a test plan suite."""

    @abstractmethod
    async def fetch_page(
        self,
        test_plan_id: int,
        suite_id: int,
        continuation_token: str = "",
    ) -> TestPointPage:
        """Fetch a single page of test points.

        Args:
            test_plan_id: Test plan the suite belongs to
            suite_id: Suite to list test points for
            continuation_token: Token returned with the previous page, empty
                for the first page

        Returns:
            Test points of the page and the token of the next page

        Raises:
            TransportError: If the request fails or returns a non-200 status
            ParseError: If the response body is not a test point list

        """
