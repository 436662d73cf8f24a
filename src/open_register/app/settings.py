from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    name: str = "Open Register"
    version: str = "0.1.0"
    # Prefix for the objects router when mounted by attach_open_register.
    api_prefix: str = "/api"

    model_config = SettingsConfigDict(
        env_prefix="APP_",  # APP_NAME, APP_VERSION, APP_API_PREFIX
        extra="ignore",
    )


@lru_cache
def get_app_settings(**kwargs) -> AppSettings:
    filtered_kwargs = {k: v for k, v in kwargs.items() if v is not None}
    return AppSettings(**filtered_kwargs)
