"""Remote content API access."""

from .client import RESOURCES, ContentApiClient, ContentApiError

__all__ = ["RESOURCES", "ContentApiClient", "ContentApiError"]
