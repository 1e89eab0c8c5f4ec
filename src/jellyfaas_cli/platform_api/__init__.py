"""Platform API exports."""

from .api_client import PlatformApiClient
from .api_errors import PlatformApiError
from .api_models import (
    BadBuild,
    BadBuildCleanup,
    BadBuildListing,
    DeployedDetails,
    DeployedFunction,
    LibraryItem,
    LibraryItemDetails,
    LibraryListing,
    TokenDetails,
    UserDetails,
    VersionDetails,
    VersionSize,
)

__all__ = [
    "BadBuild",
    "BadBuildCleanup",
    "BadBuildListing",
    "DeployedDetails",
    "DeployedFunction",
    "LibraryItem",
    "LibraryItemDetails",
    "LibraryListing",
    "PlatformApiClient",
    "PlatformApiError",
    "TokenDetails",
    "UserDetails",
    "VersionDetails",
    "VersionSize",
]
