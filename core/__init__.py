from .config import Settings, get_settings, configure_logging
from .api_client import ApiClient, ApiError, AuthError
from .query_cache import QueryCache, QueryKey, QueryPolicy, MutationResult

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "ApiClient",
    "ApiError",
    "AuthError",
    "QueryCache",
    "QueryKey",
    "QueryPolicy",
    "MutationResult",
]
