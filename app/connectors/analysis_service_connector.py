"""
app/connectors/analysis_service_connector.py

HTTP client for the external analysis service.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests
from pydantic import ValidationError

from app.config import AnalysisServiceSettings
from app.domain.analysis_payload import AnalysisPayload

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class ConnectorRequestError(RuntimeError):
    """
    Raised when the analysis service cannot be reached or answers unusably.

    ``status_code`` holds the last upstream HTTP status when there was one.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AnalysisServiceConnector:
    """
    Fetches analysis payloads, retrying throttled and failing upstream calls.

    Usage::

        connector = AnalysisServiceConnector(settings=get_analysis_service_settings())
        payload = connector.fetch_analysis("file-123", token=bearer)
    """

    source = "analysis_service"

    def __init__(
        self,
        *,
        settings: AnalysisServiceSettings,
        session: requests.Session | None = None,
        sleep=time.sleep,
    ) -> None:
        self._base_url = settings.base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout_seconds = settings.timeout_seconds
        self._max_retries = settings.max_retries
        self._backoff_initial_seconds = settings.backoff_initial_seconds
        self._backoff_multiplier = settings.backoff_multiplier
        self._sleep = sleep

    def analysis_url(self, file_id: str) -> str:
        return f"{self._base_url}/files/{file_id}/analysis"

    def fetch_analysis(self, file_id: str, token: str | None = None) -> AnalysisPayload:
        """
        Return the validated analysis payload for *file_id*.

        Raises
        ------
        ConnectorRequestError
            On transport failure, a non-2xx answer after retries, a body that
            is not JSON or a body that is not an analysis payload.
        """

        if not str(file_id).strip():
            raise ConnectorRequestError("file_id must be a non-empty string.")

        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        url = self.analysis_url(str(file_id).strip())
        body = self._get_json(url=url, headers=headers)
        try:
            payload = AnalysisPayload.model_validate(body)
        except ValidationError as exc:
            logger.error("Analysis payload rejected file_id=%s errors=%d", file_id, exc.error_count())
            raise ConnectorRequestError(f"{self.source}: response is not an analysis payload.") from exc

        logger.info(
            "Fetched analysis file_id=%s sections=%d fields=%d",
            file_id,
            len(payload.insights),
            len(payload.summary),
        )
        return payload

    def _get_json(self, *, url: str, headers: dict[str, str]) -> Any:
        response = self._get(url=url, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            raise ConnectorRequestError(
                f"{self.source}: response was not valid JSON.",
                status_code=response.status_code,
            ) from exc

    def _get(self, *, url: str, headers: dict[str, str]) -> requests.Response:
        last_error: Exception | None = None
        last_status: int | None = None
        for attempt in range(self._max_retries + 1):
            try:
                response = self._session.request(
                    method="GET",
                    url=url,
                    headers=headers,
                    timeout=self._timeout_seconds,
                )
                last_status = response.status_code
                if response.status_code in RETRYABLE_STATUS_CODES:
                    raise requests.HTTPError(
                        f"Retryable HTTP status code: {response.status_code}",
                        response=response,
                    )
                response.raise_for_status()
                return response
            except requests.HTTPError as exc:
                last_error = exc
                if last_status not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Analysis request failed status=%s url=%s error=%s",
                        last_status,
                        url,
                        exc,
                    )
                    raise ConnectorRequestError(
                        f"{self.source}: non-retryable request failure.",
                        status_code=last_status,
                    ) from exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc
                last_status = None

            if attempt >= self._max_retries:
                break

            backoff_seconds = self._backoff_initial_seconds * (self._backoff_multiplier**attempt)
            logger.warning(
                "Analysis request retry attempt=%s/%s wait_seconds=%.2f url=%s",
                attempt + 1,
                self._max_retries,
                backoff_seconds,
                url,
            )
            self._sleep(backoff_seconds)

        logger.error("Analysis request exhausted retries url=%s error=%s", url, last_error)
        raise ConnectorRequestError(
            f"{self.source}: request failed after retries.",
            status_code=last_status,
        ) from last_error
