"""Credential exchange client: app key and secret for a bearer token."""

from __future__ import annotations

import requests
import structlog

from order_invalidator.core.response_parsing import extract_token_error_message, parse_json_body
from order_invalidator.exceptions import ConfigurationError, CredentialError
from order_invalidator.utils.logger import mask_secret

logger = structlog.get_logger(__name__)

# Only 2xx counts as a granted token; 3xx replies are rejected, not followed.
SUCCESS_STATUS_MIN = 200
SUCCESS_STATUS_MAX = 300


class CredentialClient:
    """Client for the OAuth client-credentials token endpoint.

    Performs exactly one exchange per call and never retries: a failed
    exchange aborts the run and the operator repeats it by hand.
    """

    TOKEN_PATH = "/oauth/token"

    def __init__(
        self,
        base_url: str = "https://api.yotpo.com",
        timeout: float | None = None,
    ) -> None:
        if timeout is not None and timeout <= 0:
            msg = "timeout must be positive"
            raise ConfigurationError(msg)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    @property
    def token_url(self) -> str:
        return f"{self.base_url}{self.TOKEN_PATH}"

    def acquire_token(self, app_key: str, secret_key: str) -> str:
        """Exchange app_key and secret_key for an access token.

        Raises:
            CredentialError: blank inputs, transport failure, non-2xx
                status, or a response without an access token.
        """
        if not app_key or not app_key.strip() or not secret_key or not secret_key.strip():
            msg = "Both an app key and a secret key are required."
            raise CredentialError(msg)

        logger.info("token_request_started", app_key=app_key)
        try:
            response = self.session.post(
                self.token_url,
                json={
                    "grant_type": "client_credentials",
                    "client_id": app_key,
                    "client_secret": secret_key,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("token_request_failed", error=str(exc))
            msg = f"Token request failed: {exc}"
            raise CredentialError(msg) from exc

        body = parse_json_body(response.content)

        if not SUCCESS_STATUS_MIN <= response.status_code < SUCCESS_STATUS_MAX:
            cause = extract_token_error_message(body, response.status_code, response.reason)
            logger.error(
                "token_request_rejected",
                status_code=response.status_code,
                error=cause,
            )
            msg = f"Token generation failed: {cause}"
            raise CredentialError(msg, status_code=response.status_code)

        token = body.get("access_token") if body else None
        if not isinstance(token, str) or not token:
            logger.error("token_missing_from_response", status_code=response.status_code)
            msg = "Token not found in authentication response."
            raise CredentialError(msg, status_code=response.status_code)

        logger.info("token_acquired", token=mask_secret(token))
        return token
