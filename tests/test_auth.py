# tests/test_auth.py
import pytest
from unittest.mock import patch, MagicMock
from pydantic import SecretStr

from brand_central.auth import AccessToken, ClientCredentialsTokenProvider
from brand_central.config import ProviderConfiguration
from brand_central.exceptions import AuthenticationError, ErrorKind, MalformedResponseError
from conftest import make_response


@pytest.fixture
def token_session():
    session = MagicMock()
    session.post.return_value = make_response(
        json_data={"access_token": "abc", "token_type": "Bearer", "expires_in": 60}
    )
    return session


@pytest.fixture
def token_provider(token_session):
    return ClientCredentialsTokenProvider(session=token_session, timeout=5, expiry_leeway=0)


@patch("brand_central.auth.time.time", return_value=1000.0)
def test_acquire_token_performs_client_credentials_grant(
    mock_time, token_provider, token_session, configuration
):
    """Test the token request sent to the token endpoint."""
    token = token_provider.acquire_token(configuration)

    token_session.post.assert_called_once_with(
        "https://dam.example.com/oauth/2.0/token",
        data={"grant_type": "client_credentials"},
        auth=("test_client_id", "test_client_secret"),
        timeout=5,
    )
    assert token.access_token == "abc"
    assert token.expires_at == 1060.0
    assert token.authorization_header == "Bearer abc"


def test_acquire_token_reuses_cached_token(token_provider, token_session, configuration):
    first = token_provider.acquire_token(configuration)
    second = token_provider.acquire_token(configuration)

    assert first is second
    token_session.post.assert_called_once()


@patch("brand_central.auth.time.time")
def test_acquire_token_refreshes_expired_token(
    mock_time, token_provider, token_session, configuration
):
    mock_time.return_value = 1000.0
    token_provider.acquire_token(configuration)

    mock_time.return_value = 1061.0
    token_provider.acquire_token(configuration)

    assert token_session.post.call_count == 2


@patch("brand_central.auth.time.time")
def test_acquire_token_refreshes_within_leeway(mock_time, token_session, configuration):
    token_provider = ClientCredentialsTokenProvider(session=token_session, expiry_leeway=30)

    mock_time.return_value = 1000.0
    token_provider.acquire_token(configuration)
    mock_time.return_value = 1031.0
    token_provider.acquire_token(configuration)

    assert token_session.post.call_count == 2


def test_acquire_token_for_other_configuration_requests_new_token(
    token_provider, token_session, configuration
):
    other = ProviderConfiguration(
        endpoint="https://other.example.com",
        client_id="other_id",
        client_secret=SecretStr("other_secret"),
    )

    token_provider.acquire_token(configuration)
    token_provider.acquire_token(other)

    assert token_session.post.call_count == 2
    assert token_session.post.call_args.args[0] == "https://other.example.com/oauth/2.0/token"


def test_invalidate_forces_new_token(token_provider, token_session, configuration):
    token_provider.acquire_token(configuration)
    token_provider.invalidate()
    token_provider.acquire_token(configuration)

    assert token_session.post.call_count == 2


def test_token_without_lifetime_never_expires(token_provider, token_session, configuration):
    token_session.post.return_value = make_response(json_data={"access_token": "abc"})

    token = token_provider.acquire_token(configuration)

    assert token.expires_at is None
    assert not token.is_expired()


def test_token_request_rejected(token_provider, token_session, configuration):
    token_session.post.return_value = make_response(
        status_code=401,
        json_data={"error": "invalid_client", "error_description": "Client authentication failed"},
        reason="Unauthorized",
    )

    with pytest.raises(AuthenticationError, match="Client authentication failed") as exc_info:
        token_provider.acquire_token(configuration)

    assert exc_info.value.status_code == 401
    assert exc_info.value.kind == ErrorKind.AUTHENTICATION


def test_token_request_rejected_without_json(token_provider, token_session, configuration):
    token_session.post.return_value = make_response(status_code=500, reason="Server Error")

    with pytest.raises(AuthenticationError, match="Server Error"):
        token_provider.acquire_token(configuration)


def test_token_response_without_access_token(token_provider, token_session, configuration):
    token_session.post.return_value = make_response(json_data={"token_type": "Bearer"})

    with pytest.raises(MalformedResponseError):
        token_provider.acquire_token(configuration)


def test_access_token_is_expired():
    token = AccessToken(access_token="abc", expires_at=100.0)

    assert not token.is_expired(now=50.0)
    assert token.is_expired(now=100.0)
    assert token.is_expired(leeway=60, now=50.0)


def test_authorization_header_is_always_bearer(token_provider, token_session, configuration):
    token_session.post.return_value = make_response(
        json_data={"access_token": "abc", "token_type": "bearer"}
    )

    token = token_provider.acquire_token(configuration)

    assert token.authorization_header == "Bearer abc"
