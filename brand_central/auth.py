# auth.py
import logging
import time
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import requests
from pydantic import BaseModel

from .config import ProviderConfiguration
from .exceptions import AuthenticationError, MalformedResponseError


class AccessToken(BaseModel):
    """A bearer token issued by the Brand Central token endpoint."""

    access_token: str
    expires_at: Optional[float] = None

    def is_expired(self, leeway: float = 0, now: Optional[float] = None) -> bool:
        # Tokens issued without a lifetime stay valid until invalidated
        if self.expires_at is None:
            return False
        now = time.time() if now is None else now
        return now >= self.expires_at - leeway

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"


class TokenProvider(ABC):
    """
    Supplies bearer tokens for authenticated API calls.
    Implementations decide how tokens are cached and refreshed.
    """

    @abstractmethod
    def acquire_token(self, config: ProviderConfiguration) -> AccessToken:
        """
        Returns a token that is valid for the given configuration.

        :param config: The connection settings to authenticate with.
        """
        pass

    @abstractmethod
    def invalidate(self):
        """Drops any cached token so the next call re-authorizes."""
        pass


class ClientCredentialsTokenProvider(TokenProvider):
    """
    Performs the OAuth2 client-credentials grant against
    `{endpoint}/oauth/2.0/token` and caches the result until it expires.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        expiry_leeway: float = 30,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.expiry_leeway = expiry_leeway
        self._token: Optional[AccessToken] = None
        self._token_key: Optional[Tuple[str, str]] = None

    def acquire_token(self, config: ProviderConfiguration) -> AccessToken:
        key = (config.token_url, config.client_id)
        if (
            self._token is not None
            and self._token_key == key
            and not self._token.is_expired(self.expiry_leeway)
        ):
            return self._token

        self._token = self._request_token(config)
        self._token_key = key
        return self._token

    def invalidate(self):
        self._token = None
        self._token_key = None

    def _request_token(self, config: ProviderConfiguration) -> AccessToken:
        client_secret = config.client_secret.get_secret_value()
        # Client credentials go in the basic auth header only
        token_params = {"grant_type": "client_credentials"}

        logging.info(f"Requesting access token from {config.token_url}")
        requested_at = time.time()
        response = self.session.post(
            config.token_url,
            data=token_params,
            auth=(config.client_id, client_secret),
            timeout=self.timeout,
        )

        if response.status_code != 200:
            detail = _error_description(response)
            logging.error(
                f"Token request to {config.token_url} failed with status {response.status_code}: {detail}"
            )
            raise AuthenticationError(
                f"Authentication failed ({response.status_code}): {detail}",
                status_code=response.status_code,
            )

        try:
            token_data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "The token endpoint did not return JSON.",
                status_code=response.status_code,
            ) from e

        if not isinstance(token_data, dict) or not token_data.get("access_token"):
            raise MalformedResponseError(
                "The token endpoint response does not contain an access token.",
                status_code=response.status_code,
            )

        expires_at = None
        expires_in = token_data.get("expires_in")
        if expires_in is not None:
            try:
                expires_at = requested_at + float(expires_in)
            except (TypeError, ValueError):
                logging.warning(f"Ignoring invalid token lifetime: {expires_in!r}")

        return AccessToken(
            access_token=str(token_data["access_token"]),
            expires_at=expires_at,
        )


def _error_description(response) -> str:
    """Best-effort extraction of an OAuth error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.reason or "unknown error"
    if isinstance(body, dict):
        for key in ("error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.reason or "unknown error"
