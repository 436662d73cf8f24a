from .client import DataApiClient
from .config import DataApiConfig, DataApiSettings, get_data_api_settings

__all__ = [
    "DataApiClient",
    "DataApiConfig",
    "DataApiSettings",
    "get_data_api_settings",
]
