"""HTTP clients for the external services behind the builtin tools.

Every client takes a shared ``httpx.AsyncClient`` and raises
``IntegrationError`` on transport or HTTP failures.
"""

from .errors import IntegrationError, IntegrationNotConfiguredError
from .media import EmbeddingClient, MediaGenerationClient
from .social import FacebookGraphClient, LinkedInClient, TikTokClient
from .web import WebPageReader
from .wordpress import WordPressClient

__all__ = [
    "EmbeddingClient",
    "FacebookGraphClient",
    "IntegrationError",
    "IntegrationNotConfiguredError",
    "LinkedInClient",
    "MediaGenerationClient",
    "TikTokClient",
    "WebPageReader",
    "WordPressClient",
]
