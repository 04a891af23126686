"""Test point page fetchers."""

from results_fetcher.client.azure_devops import AzureDevOpsClient
from results_fetcher.client.base import PageFetcher

__all__ = ["AzureDevOpsClient", "PageFetcher"]
