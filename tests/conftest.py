# tests/conftest.py
import pytest
from unittest.mock import MagicMock
from pydantic import SecretStr

from brand_central.auth import AccessToken, TokenProvider
from brand_central.config import ProviderConfiguration, Settings, get_settings
from brand_central.provider import BrandCentralProvider

ENDPOINT = "https://dam.example.com/"

# Marker for responses whose body is not JSON
NO_JSON = object()


def make_response(status_code=200, json_data=NO_JSON, content=b"", reason="OK"):
    """Builds a stand-in for requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.content = content
    if json_data is NO_JSON:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Makes sure no test sees settings cached by another one."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path):
    """Settings with explicit values, independent of the environment and .env files."""
    return Settings(
        _env_file=None,
        HTTP_TIMEOUT_SECONDS=5,
        TOKEN_EXPIRY_LEEWAY_SECONDS=30,
        ASSET_ID_ATTRIBUTE="brand_central_asset_file_id",
        LOCAL_STORE_DIR=tmp_path / "store",
    )


@pytest.fixture
def configuration():
    return ProviderConfiguration(
        endpoint=ENDPOINT,
        client_id="test_client_id",
        client_secret=SecretStr("test_client_secret"),
    )


@pytest.fixture
def mock_token_provider():
    """A token provider that always hands out the same bearer token."""
    token_provider = MagicMock(spec=TokenProvider)
    token_provider.acquire_token.return_value = AccessToken(access_token="test_token")
    return token_provider


@pytest.fixture
def mock_session():
    """Fixture for a mock requests session."""
    return MagicMock()


@pytest.fixture
def mock_file_importer():
    return MagicMock()


@pytest.fixture
def mock_filesystem():
    return MagicMock()


@pytest.fixture
def provider(
    configuration,
    mock_file_importer,
    mock_filesystem,
    mock_token_provider,
    mock_session,
    settings,
):
    return BrandCentralProvider(
        configuration=configuration,
        file_importer=mock_file_importer,
        filesystem=mock_filesystem,
        token_provider=mock_token_provider,
        session=mock_session,
        settings=settings,
    )
