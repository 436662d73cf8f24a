from __future__ import annotations

from functools import lru_cache
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError

DEFAULT_DATABASE = "objects"
DEFAULT_COLLECTION = "json"


class DataApiConfig(BaseModel):
    """Validated connection parameters for one remote document data source.

    Accepts both the pythonic field names and the legacy register layout
    (``base_uri``, ``mongodbCluster``, ``headers: {"api-key": ...}``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    base_url: str = Field(alias="base_uri", min_length=1)
    api_key: Optional[SecretStr] = None
    data_source: str = Field(alias="mongodbCluster", min_length=1)
    database: str = DEFAULT_DATABASE
    collection: str = DEFAULT_COLLECTION
    timeout: Optional[float] = Field(default=None, gt=0)

    @model_validator(mode="before")
    @classmethod
    def _lift_legacy_headers(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            headers = data.get("headers")
            if isinstance(headers, Mapping) and "api-key" in headers and "api_key" not in data:
                data = {**data, "api_key": headers["api-key"]}
        return data

    @classmethod
    def coerce(cls, value: Union["DataApiConfig", Mapping[str, Any]]) -> "DataApiConfig":
        if isinstance(value, DataApiConfig):
            return value
        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f"Data API configuration must be a mapping, got {type(value).__name__}"
            )
        try:
            return cls.model_validate(dict(value))
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid data API configuration: {exc}") from exc

    def envelope(self, filters: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "dataSource": self.data_source,
            "database": self.database,
            "collection": self.collection,
            "filter": dict(filters),
        }

    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.api_key is not None:
            headers["api-key"] = self.api_key.get_secret_value()
        return headers


class DataApiSettings(BaseSettings):
    """Default data API connection, read from DATA_API_* env vars."""

    base_url: Optional[str] = None
    api_key: Optional[SecretStr] = None
    data_source: Optional[str] = None
    database: str = DEFAULT_DATABASE
    collection: str = DEFAULT_COLLECTION
    timeout: Optional[float] = None

    model_config = SettingsConfigDict(
        env_prefix="DATA_API_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.data_source)

    def to_config(self) -> DataApiConfig:
        if not self.configured:
            raise ConfigurationError(
                "DATA_API_BASE_URL and DATA_API_DATA_SOURCE must be set to reach the data API"
            )
        return DataApiConfig(
            base_url=self.base_url,
            api_key=self.api_key,
            data_source=self.data_source,
            database=self.database,
            collection=self.collection,
            timeout=self.timeout,
        )


@lru_cache
def get_data_api_settings(**kwargs) -> DataApiSettings:
    filtered = {k: v for k, v in kwargs.items() if v is not None}
    return DataApiSettings(**filtered)
