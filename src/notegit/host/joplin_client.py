"""Joplin Data API client.

Talks to the REST service exposed by the Joplin desktop app (the Web Clipper
service, ``http://localhost:41184`` by default). Listings are paginated with
``page``/``has_more`` and projected with ``fields``.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import requests
from pydantic import ValidationError

from notegit.exceptions import ErrorCode, HostStoreError
from notegit.models.schema import Notebook, NotePage

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 3


class JoplinClient:
    """:class:`notegit.host.HostStore` backed by the Joplin Data API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session or requests.Session()
        self.request_count = 0

    def _get(self, resource: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET ``resource`` and return the decoded JSON object.

        Connection errors, timeouts and 5xx answers are retried with a short
        backoff; anything else fails immediately.
        """
        url = f"{self.base_url}/{resource}"
        query = {**params, "token": self.token}
        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            self.request_count += 1
            try:
                response = self._session.get(url, params=query, timeout=self.timeout)
            except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
                last_error = e
                logger.warning(
                    "Joplin request to %s failed (attempt %d/%d): %s",
                    resource,
                    attempt,
                    self.max_retries,
                    e,
                )
                if attempt < self.max_retries:
                    time.sleep(0.5 * attempt)
                continue
            except requests.exceptions.RequestException as e:
                # Bad URL, redirect loop or broken body; not retried
                raise HostStoreError(
                    f"Joplin request to {resource} failed: {e}",
                    resource=resource,
                    original_error=e,
                ) from e

            if response.status_code >= 500 and attempt < self.max_retries:
                logger.warning(
                    "Joplin server error %d on %s, retry %d/%d",
                    response.status_code,
                    resource,
                    attempt,
                    self.max_retries,
                )
                time.sleep(0.5 * attempt)
                continue

            if response.status_code != 200:
                raise HostStoreError(
                    f"Joplin returned HTTP {response.status_code} for {resource}",
                    resource=resource,
                    status_code=response.status_code,
                )

            try:
                payload = response.json()
            except ValueError as e:
                raise HostStoreError(
                    f"Joplin returned invalid JSON for {resource}",
                    resource=resource,
                    code=ErrorCode.HOST_RESPONSE_INVALID,
                    original_error=e,
                )
            if not isinstance(payload, dict):
                raise HostStoreError(
                    f"Unexpected response shape for {resource}",
                    resource=resource,
                    code=ErrorCode.HOST_RESPONSE_INVALID,
                )
            return payload

        raise HostStoreError(
            f"Joplin unreachable after {self.max_retries} attempts",
            resource=resource,
            original_error=last_error,
        )

    def list_notebooks(self, fields: Sequence[str]) -> List[Notebook]:
        """Return every folder, following ``has_more`` until exhausted."""
        notebooks: List[Notebook] = []
        page = 1
        while True:
            payload = self._get("folders", {"fields": ",".join(fields), "page": page})
            try:
                notebooks.extend(
                    Notebook.model_validate(item) for item in payload["items"]
                )
            except (KeyError, TypeError, ValidationError) as e:
                raise HostStoreError(
                    "Unexpected folder listing from Joplin",
                    resource="folders",
                    code=ErrorCode.HOST_RESPONSE_INVALID,
                    original_error=e,
                )
            if not payload.get("has_more"):
                return notebooks
            page += 1

    def list_notes(self, fields: Sequence[str], page: int) -> NotePage:
        payload = self._get("notes", {"fields": ",".join(fields), "page": page})
        try:
            return NotePage.model_validate(payload)
        except ValidationError as e:
            raise HostStoreError(
                f"Unexpected note listing from Joplin (page {page})",
                resource="notes",
                code=ErrorCode.HOST_RESPONSE_INVALID,
                original_error=e,
            )
