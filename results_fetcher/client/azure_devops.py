"""Azure DevOps test plan client."""

import base64
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field

import aiohttp
from pydantic import ValidationError

from results_fetcher.client.base import PageFetcher
from results_fetcher.config import FetcherConfig
from results_fetcher.errors import ParseError, TransportError
from results_fetcher.models.test_point import TestPointList, TestPointPage

log = logging.getLogger(__name__)

API_VERSION = "7.1"
CONTINUATION_TOKEN_HEADER = "x-ms-continuationtoken"


@dataclass(frozen=True, kw_only=True)
class AzureDevOpsClient(PageFetcher):
    """Page fetcher for the Azure DevOps test plan API."""

    config: FetcherConfig
    session: aiohttp.ClientSession = field(repr=False)

    @classmethod
    @asynccontextmanager
    async def from_config(
        cls, config: FetcherConfig
    ) -> AsyncGenerator["AzureDevOpsClient", None]:
        """Create client with managed session lifecycle."""
        # Azure DevOps uses Basic Auth with empty username and PAT as password
        auth_string = f":{config.token.get_secret_value()}"
        auth_bytes = base64.b64encode(auth_string.encode("ascii")).decode("ascii")
        headers = {
            "Authorization": f"Basic {auth_bytes}",
            "Accept": "application/json",
        }
        async with aiohttp.ClientSession(
            base_url=config.api_base_url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=config.request_timeout),
        ) as session:
            yield cls(config=config, session=session)

    async def fetch_page(
        self,
        test_plan_id: int,
        suite_id: int,
        continuation_token: str = "",
    ) -> TestPointPage:
        """Fetch one page of test points for a suite."""
        url = (
            f"/{self.config.organization}/{self.config.project}"
            f"/_apis/testplan/Plans/{test_plan_id}/Suites/{suite_id}/TestPoint"
        )
        params = {
            "continuationToken": continuation_token,
            "api-version": API_VERSION,
        }

        try:
            async with self.session.get(url, params=params) as response:
                if response.status != 200:
                    text = await response.text()
                    raise TransportError(
                        f"Failed to get test points of suite {suite_id}: "
                        f"{response.status} {text}"
                    )
                next_token = response.headers.get(CONTINUATION_TOKEN_HEADER, "")
                try:
                    data = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as exc:
                    raise ParseError(
                        f"Test points of suite {suite_id} are not valid JSON: {exc}"
                    ) from exc
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise TransportError(
                f"Request for test points of suite {suite_id} failed: {exc!r}"
            ) from exc

        try:
            points = TestPointList.model_validate(data)
        except ValidationError as exc:
            raise ParseError(
                f"Unexpected test point response for suite {suite_id}: {exc}"
            ) from exc

        log.debug(
            "Fetched %d test point(s) for suite %d (more=%s)",
            len(points.value),
            suite_id,
            bool(next_token),
        )
        return TestPointPage(results=points.value, continuation_token=next_token)
