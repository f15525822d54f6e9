# gateway.py
import logging
from enum import Enum
from typing import Any, Mapping, Optional

import requests
from pydantic import BaseModel

from .auth import TokenProvider
from .config import ProviderConfiguration
from .exceptions import MalformedResponseError, RemoteApiError, UnexpectedStatusError


class ResultStatus(str, Enum):
    SUCCESS = "success"
    # The provider is missing credentials or has no usable endpoint URL
    UNCONFIGURED = "unconfigured"
    # The remote rejected the request (4xx) without an error payload
    EMPTY = "empty"


class ApiResult(BaseModel):
    """Outcome of a gateway call that did not raise."""

    status: ResultStatus
    data: Any = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == ResultStatus.SUCCESS


class ApiGateway:
    """
    Issues authenticated GET requests against the Brand Central public API
    and normalizes the remote error payloads.
    """

    def __init__(
        self,
        config: ProviderConfiguration,
        token_provider: TokenProvider,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
    ):
        self.config = config
        self.token_provider = token_provider
        self.session = session or requests.Session()
        self.timeout = timeout

    def build_url(self, path: str) -> str:
        return f"{self.config.base_url}/{path.lstrip('/')}"

    def do_request(
        self, path: str, query_params: Optional[Mapping[str, Any]] = None
    ) -> ApiResult:
        """
        Performs a GET request to the configured endpoint with OAuth2 authentication.

        :param path: API path relative to the endpoint.
        :param query_params: Query string parameters; None values are omitted.
        :return: An ApiResult. Remote error payloads and unexpected status codes raise.
        """
        if not self.config.is_configured:
            logging.warning(
                f"Brand Central provider is not configured, skipping request to '{path}'."
            )
            return ApiResult(status=ResultStatus.UNCONFIGURED)

        url = self.build_url(path)
        params = dict(query_params) if query_params else None

        response = self._get(url, params)
        if response.status_code == 401:
            # The cached token may have been revoked; re-authorize once
            logging.info(f"Access token rejected for {url}, re-authorizing...")
            self.token_provider.invalidate()
            response = self._get(url, params)

        if response.status_code == 200:
            payload = self._decode(response, strict=True)
            raise_for_error_payload(payload, response.status_code)
            return ApiResult(
                status=ResultStatus.SUCCESS,
                data=payload,
                status_code=response.status_code,
            )

        if 400 <= response.status_code < 500:
            payload = self._decode(response, strict=False)
            raise_for_error_payload(payload, response.status_code)
            logging.warning(
                f"Request to {url} was rejected with status {response.status_code} and no error details."
            )
            return ApiResult(status=ResultStatus.EMPTY, status_code=response.status_code)

        logging.error(f"Request to {url} returned unexpected status {response.status_code}.")
        raise UnexpectedStatusError("Invalid status code.", status_code=response.status_code)

    def _get(self, url: str, params: Optional[dict]):
        token = self.token_provider.acquire_token(self.config)
        logging.debug(f"GET {url} params={params}")
        return self.session.get(
            url,
            params=params,
            headers={
                "Authorization": token.authorization_header,
                "Accept": "application/json",
            },
            timeout=self.timeout,
        )

    @staticmethod
    def _decode(response, strict: bool) -> Any:
        try:
            return response.json()
        except ValueError as e:
            if strict:
                raise MalformedResponseError(
                    "The API response is not valid JSON.",
                    status_code=response.status_code,
                ) from e
            return None


def raise_for_error_payload(payload: Any, status_code: Optional[int] = None):
    """
    Raises RemoteApiError when the payload has the `{error, errors}` shape.
    Only the first message of `errors` is reported.
    """
    if not isinstance(payload, dict) or payload.get("error") is None:
        return

    errors = payload.get("errors")
    if isinstance(errors, str) and errors:
        raise RemoteApiError(errors, status_code=status_code)
    if isinstance(errors, list) and errors:
        raise RemoteApiError(str(errors[0]), status_code=status_code)
