import aiohttp
import asyncio
import logging
from typing import Dict, Any, List

from src.domain.exceptions import DataSourceUnavailableException, SubmissionRejectedException

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://us-central1-githubglimpse.cloudfunctions.net/appFunction"
DEFAULT_TIMEOUT_SECONDS = 30
SERVER_ERROR_STATUSES = {500, 502, 503, 504}

class DirectoryApiClient:
    """
    Client for the project directory API.
    Fetches the tracked projects and forwards repository submissions.
    """

    def __init__(self, base_url: str = DEFAULT_API_URL, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "Accept": "application/json",
            "User-Agent": "project-directory",
        }
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds, connect=10)

    @property
    def repos_url(self) -> str:
        return f"{self.base_url}/repos"

    @property
    def add_repo_url(self) -> str:
        return f"{self.base_url}/add-repo"

    async def fetch_projects(self, session: aiohttp.ClientSession) -> List[Dict[str, Any]]:
        """
        Fetches the raw project list. No retries: a failure is final for this session.

        Returns:
            List[Dict[str, Any]]: Raw project records as returned by `GET /repos`.
        """
        try:
            async with session.get(self.repos_url, headers=self.headers, timeout=self.timeout) as response:
                if response.status >= 400:
                    raise DataSourceUnavailableException("Failed to fetch projects.", status=response.status)
                data = await response.json()
        # ValueError covers a body that is not valid JSON.
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Fetching projects from {self.repos_url} failed: {e}")
            raise DataSourceUnavailableException(f"Failed to fetch projects: {e}") from e

        if not isinstance(data, list):
            raise DataSourceUnavailableException(
                f"Unexpected /repos payload of type {type(data).__name__}."
            )

        logger.info(f"Fetched {len(data)} projects.")
        return data

    async def submit_repository(self, session: aiohttp.ClientSession, url: str) -> str:
        """
        Submits a repository URL for inclusion. The URL is forwarded verbatim.

        Returns:
            str: The server's message, empty when it sent none.
        """
        if not url or not url.strip():
            raise SubmissionRejectedException("Repository URL is required.")

        payload = {"url": url}
        try:
            async with session.post(self.add_repo_url, json=payload, headers=self.headers, timeout=self.timeout) as response:
                if response.status in SERVER_ERROR_STATUSES:
                    raise DataSourceUnavailableException("Submission failed.", status=response.status)

                data = await self._read_json(response)
                if response.status >= 400:
                    message = data.get('message') or data.get('error') or "Repository submission was rejected."
                    raise SubmissionRejectedException(message, status=response.status)

        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Submitting {url} failed: {e}")
            raise DataSourceUnavailableException(f"Submission failed: {e}") from e

        logger.info(f"Submitted repository {url}.")
        return data.get('message') or ""

    @staticmethod
    async def _read_json(response) -> Dict[str, Any]:
        # Error responses are not guaranteed to carry a JSON object.
        try:
            data = await response.json()
        except (aiohttp.ContentTypeError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}
