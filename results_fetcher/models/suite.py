"""Models for the test suites a report is built for."""

from pydantic import Field

from results_fetcher.models.base import Model


class Suite(Model):
    """A named test suite of the configured test plan."""

    id: int = Field(..., gt=0, alias="Id", description="Test suite ID")
    name: str = Field(..., alias="Name", description="Display name in reports")
