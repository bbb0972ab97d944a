"""P2P Quake History Client - Imperative Shell.

This module fetches the most recent finalized report over HTTP so the
display has something to show before the first live report arrives.
All I/O is contained here; parsing is in the core module.
"""

import logging
from typing import Any

import requests

from src.core.config import P2P_HISTORY_URL
from src.core.report import REPORT_CODE, SeismicReport, parse_report


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 30


class P2PHistoryClient:
    """Client for the P2P Quake history API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str = P2P_HISTORY_URL,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize history client.

        Args:
            base_url: History API URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url
        self.timeout = timeout

    def fetch_reports(self, limit: int = 1) -> list[dict[str, Any]]:
        """Fetch raw finalized-report records, newest first.

        This method performs HTTP I/O.

        Args:
            limit: Maximum number of records

        Returns:
            Raw records from the API

        Raises:
            requests.RequestException: If the request fails
        """
        params = {"codes": str(REPORT_CODE), "limit": str(limit)}

        logger.info(
            "Fetching report history",
            extra={"params": params},
        )

        response = requests.get(
            self.base_url,
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()

        data = response.json()
        if not isinstance(data, list):
            logger.warning("Unexpected history response type: %s", type(data).__name__)
            return []

        logger.info("Fetched %d history records", len(data))
        return data

    def fetch_latest_report(self) -> SeismicReport | None:
        """Fetch and parse the most recent finalized report.

        Failures are logged and yield None; the live feed will fill in.

        Returns:
            Latest report, or None if unavailable
        """
        try:
            records = self.fetch_reports(limit=1)
        except (requests.RequestException, ValueError) as e:
            logger.warning("Failed to fetch report history: %s", e)
            return None

        for record in records:
            report = parse_report(record)
            if report is not None:
                return report

        return None
