"""Purchases API client that invalidates one batch of orders per call."""

from __future__ import annotations

from typing import TYPE_CHECKING

import requests
import structlog

from order_invalidator.core.response_parsing import extract_batch_error_message, parse_json_body
from order_invalidator.exceptions import BatchApiError, BatchTransportError, ConfigurationError
from order_invalidator.models.batch_outcome import BatchOutcome
from order_invalidator.utils.retry import retry_with_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = structlog.get_logger(__name__)

SUCCESS_STATUS_CODES = frozenset({200, 204})


class InvalidationClient:
    """Client for the bulk purchase DELETE endpoint.

    invalidate_batch always returns a BatchOutcome. Every failure is
    classified into a failed outcome so the caller can move on to the
    next batch.
    """

    def __init__(
        self,
        base_url: str = "https://api.yotpo.com",
        timeout: float | None = None,
        max_attempts: int = 1,
    ) -> None:
        if timeout is not None and timeout <= 0:
            msg = "timeout must be positive"
            raise ConfigurationError(msg)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def purchases_url(self, app_key: str) -> str:
        return f"{self.base_url}/apps/{app_key}/purchases"

    def invalidate_batch(
        self,
        credential: str,
        app_key: str,
        batch: Sequence[str],
    ) -> BatchOutcome:
        """Submit one batch of order ids for invalidation and classify the result."""
        count = len(batch)
        try:
            status_code = self._submit(credential, app_key, batch)
        except BatchApiError as exc:
            return self._failed(batch, str(exc), "BatchApiError", exc.status_code)
        except BatchTransportError as exc:
            return self._failed(batch, str(exc), "BatchTransportError", None)

        logger.info("batch_invalidated", orders=count, status_code=status_code)
        return BatchOutcome.succeeded(count, status_code=status_code)

    def _submit(self, credential: str, app_key: str, batch: Sequence[str]) -> int:
        """Send the DELETE request; return the success status or raise a batch error."""
        payload = {
            "utoken": credential,
            "orders": [{"order_id": order_id} for order_id in batch],
        }
        send = retry_with_logging(max_attempts=self.max_attempts)(self._send)
        try:
            response = send(self.purchases_url(app_key), payload)
        except requests.RequestException as exc:
            msg = f"Network error: {exc}"
            raise BatchTransportError(msg) from exc

        if response.status_code in SUCCESS_STATUS_CODES:
            return response.status_code

        body = parse_json_body(response.content)
        message = extract_batch_error_message(body, response.status_code, response.reason)
        raise BatchApiError(message, status_code=response.status_code)

    def _send(self, url: str, payload: dict[str, object]) -> requests.Response:
        return self.session.delete(url, json=payload, timeout=self.timeout)

    def _failed(
        self,
        batch: Sequence[str],
        reason: str,
        error_type: str,
        status_code: int | None,
    ) -> BatchOutcome:
        distinct = tuple(dict.fromkeys(batch))
        logger.warning(
            "batch_invalidation_failed",
            orders=len(batch),
            distinct_orders=len(distinct),
            error_type=error_type,
            status_code=status_code,
            error=reason,
        )
        for order_id in distinct:
            logger.debug("order_invalidation_failed", order_id=order_id, error=reason)
        return BatchOutcome.failed(
            len(batch),
            reason,
            error_type=error_type,
            status_code=status_code,
            failed_identifiers=distinct,
        )
