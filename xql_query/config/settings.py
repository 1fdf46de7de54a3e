"""Typed runtime settings with dotenv support and startup validation."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xql_query.adapters.xql_protocol import XQL_INLINE_RESULT_THRESHOLD
from xql_query.domain import InvalidTimeFormatError, UnsupportedTimeUnitError, domain_parse_relative_time


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Client settings for XQL API access and query polling.

    Environment variable names map directly to field names in uppercase.
    Example: `xql_base_url` reads from `XQL_BASE_URL`.

    Attributes:
        xql_base_url: Tenant API base URL; endpoints live under `/public_api/v1/xql/`.
        xql_api_key_id: API key identifier sent as `x-xdr-auth-id`.
        xql_api_key: API key secret.
        xql_api_key_type: `standard` or `advanced` key signing mode.
        xql_request_timeout_seconds: HTTP request timeout.
        xql_poll_interval_seconds: Fixed delay between polls while a query is pending.
        xql_poll_max_attempts: Maximum get-results requests per query.
        xql_poll_timeout_seconds: Wall-clock budget for one poll loop.
        xql_default_result_limit: Default inline result limit.
        xql_default_relative_time: Default relative time token.
        xql_stream_gzip_compressed: Request gzip-compressed result streams.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    xql_base_url: str = Field(min_length=1)
    xql_api_key_id: str = Field(min_length=1)
    xql_api_key: str = Field(min_length=1)
    xql_api_key_type: str = Field(default="standard")
    xql_request_timeout_seconds: float = Field(default=30.0, gt=0)
    xql_poll_interval_seconds: float = Field(default=2.0, ge=0)
    xql_poll_max_attempts: int = Field(default=150, ge=1)
    xql_poll_timeout_seconds: float = Field(default=300.0, gt=0)
    xql_default_result_limit: int = Field(default=XQL_INLINE_RESULT_THRESHOLD, ge=1, le=XQL_INLINE_RESULT_THRESHOLD)
    xql_default_relative_time: str = Field(default="1d")
    xql_stream_gzip_compressed: bool = Field(default=False)

    @field_validator("xql_base_url", "xql_api_key_id", "xql_api_key")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("xql_base_url")
    @classmethod
    def _validate_base_url_scheme(cls, value: str) -> str:
        if not value.startswith(("https://", "http://")):
            raise ValueError("xql_base_url must start with http:// or https://")
        return value.rstrip("/")

    @field_validator("xql_api_key_type")
    @classmethod
    def _validate_api_key_type(cls, value: str) -> str:
        normalized_value = value.strip().lower()
        if normalized_value not in ("standard", "advanced"):
            raise ValueError("xql_api_key_type must be 'standard' or 'advanced'")
        return normalized_value

    @field_validator("xql_default_relative_time")
    @classmethod
    def _validate_relative_time(cls, value: str) -> str:
        try:
            domain_parse_relative_time(value)
        except (InvalidTimeFormatError, UnsupportedTimeUnitError) as error:
            raise ValueError(str(error)) from error
        return value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
