"""
FetchSERP - async Python client for the FetchSERP search and SEO data API.

Library Usage:
    import asyncio
    from fetchserp import FetchSerpClient

    async def main():
        client = FetchSerpClient(api_key="your_key")
        results = await client.get_serp("best seo tools", country="us")
        volume = await client.get_keywords_search_volume(["seo", "serp api"])

    asyncio.run(main())

CLI Usage:
    fetchserp serp "best seo tools" --country us
    fetchserp call get_backlinks -p domain=example.com | jq '.'
    fetchserp check
"""

__version__ = "1.0.0"

# Semantic versioning
# MAJOR.MINOR.PATCH
VERSION_INFO = {
    "major": 1,
    "minor": 0,
    "patch": 0,
    "release": "stable",  # stable, beta, alpha
}


def get_version() -> str:
    """Get full version string."""
    version = f"{VERSION_INFO['major']}.{VERSION_INFO['minor']}.{VERSION_INFO['patch']}"
    if VERSION_INFO["release"] != "stable":
        version += f"-{VERSION_INFO['release']}"
    return version


from fetchserp.config import ClientConfig, Settings, load_config, DEFAULT_BASE_URL, DEFAULT_TIMEOUT_MS
from fetchserp.errors import (
    FetchSerpError,
    AuthenticationError,
    ConfigurationError,
    ValidationError,
    TransportError,
    RequestTimeoutError,
    APIError,
    UnauthorizedError,
    RateLimitError,
    DecodeError,
)
from fetchserp.models import RequestDescriptor
from fetchserp.executor import RequestExecutor
from fetchserp.client import FetchSerpClient, ENDPOINTS

__all__ = [
    "FetchSerpClient",
    "ENDPOINTS",
    "RequestExecutor",
    "RequestDescriptor",
    "ClientConfig",
    "Settings",
    "load_config",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_MS",
    # Errors
    "FetchSerpError",
    "AuthenticationError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "RequestTimeoutError",
    "APIError",
    "UnauthorizedError",
    "RateLimitError",
    "DecodeError",
    "__version__",
    "get_version",
    "VERSION_INFO",
]
