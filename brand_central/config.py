from pathlib import Path
from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any, List, Mapping, Optional
from urllib.parse import urlparse
from functools import lru_cache

# Form field name -> human-readable label used in validation messages
REQUIRED_FORM_FIELDS = {
    "endpoint": "Endpoint",
    "clientId": "Client ID",
    "clientSecret": "Client Secret",
}


class Settings(BaseSettings):
    """
    Centralized application configuration with type validation.
    Automatically reads variables from the environment and an optional .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Brand Central credentials (optional, used by the command line) ---
    BRAND_CENTRAL_ENDPOINT: Optional[str] = None
    BRAND_CENTRAL_CLIENT_ID: Optional[str] = None
    BRAND_CENTRAL_CLIENT_SECRET: Optional[SecretStr] = None

    # --- General Settings ---
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[Path] = None

    # --- HTTP Settings ---
    HTTP_TIMEOUT_SECONDS: float = Field(30.0, gt=0)
    TOKEN_EXPIRY_LEEWAY_SECONDS: int = Field(30, ge=0)

    # --- Import Settings ---
    ASSET_ID_ATTRIBUTE: str = "brand_central_asset_file_id"
    LOCAL_STORE_DIR: Path = Path("brand_central_store")


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the application settings.
    The first call to this function will initialize the settings.
    """
    return Settings()


def is_well_formed_url(value: Optional[str]) -> bool:
    """True when the value is an absolute http(s) URL with a host."""
    if not value:
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ProviderConfiguration(BaseModel):
    """
    Immutable connection settings for one Brand Central instance.
    Built once from the settings form and handed to the gateway.
    """

    model_config = ConfigDict(frozen=True)

    endpoint: str = ""
    client_id: str = ""
    client_secret: SecretStr = SecretStr("")

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ProviderConfiguration":
        """
        Copies the three form fields verbatim.
        A missing key raises KeyError; call validate_form() first.
        A None value is loaded as an empty string, leaving the provider unconfigured.
        """
        endpoint, client_id, client_secret = (
            "" if form[key] is None else form[key] for key in REQUIRED_FORM_FIELDS
        )
        return cls(
            endpoint=endpoint,
            client_id=client_id,
            client_secret=SecretStr(client_secret),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfiguration":
        secret = settings.BRAND_CENTRAL_CLIENT_SECRET
        return cls(
            endpoint=settings.BRAND_CENTRAL_ENDPOINT or "",
            client_id=settings.BRAND_CENTRAL_CLIENT_ID or "",
            client_secret=secret if secret is not None else SecretStr(""),
        )

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")

    @property
    def token_url(self) -> str:
        return f"{self.base_url}/oauth/2.0/token"

    @property
    def is_configured(self) -> bool:
        """All credentials are present and the endpoint is a usable URL."""
        return (
            is_well_formed_url(self.endpoint)
            and bool(self.client_id)
            and bool(self.client_secret.get_secret_value())
        )


def validate_form(form: Mapping[str, Any]) -> List[str]:
    """
    Checks that every required field is present and non-empty.

    :param form: Raw key/value pairs submitted by the settings form.
    :return: A list of error messages; empty when the form is valid.
    """
    errors = []
    for key, label in REQUIRED_FORM_FIELDS.items():
        value = form.get(key)
        if value is None or not str(value).strip():
            errors.append(f"Field '{key}' ({label}) is required.")
    return errors
