"""Factory for creating contents clients with DEBUG mode support."""

import importlib.util

from ..config.settings import Settings
from ..protocols.content_client_protocol import ContentClientProtocol
from .content_client import ContentClient
from .transport import RetryingTransport


def create_content_client(
    base_url: str = "https://api.github.com",
    token: str = "",
    timeout_ms: int = 15000,
    retries: int = 1,
    fallback_delay_ms: int = 1000,
    affiliation: str = "owner,collaborator,organization_member",
    debug_mode: bool = False,
) -> ContentClientProtocol:
    """
    Create a contents client based on debug mode.

    Args:
        base_url: Base URL of the contents API
        token: Bearer credential, empty until the user logs in
        timeout_ms: Per-request deadline
        retries: Rate-limit retry budget per request
        fallback_delay_ms: Wait used when the host sends no Retry-After
        affiliation: Affiliation filter for the repository listing
        debug_mode: If True, returns the in-memory MockContentClient

    Returns:
        ContentClientProtocol implementation
    """
    if debug_mode:
        # The mock lives in dev/, which main.py puts on sys.path in DEBUG mode
        if importlib.util.find_spec("mocks.content_client") is not None:
            from mocks.content_client import MockContentClient

            print("🔧 DEBUG mode: Using MockContentClient")
            return MockContentClient(token=token)
        print("⚠️ MockContentClient not available, falling back to ContentClient")

    print(f"🌐 Production mode: Using ContentClient against {base_url}")
    transport = RetryingTransport(
        timeout_ms=timeout_ms, retries=retries, fallback_delay_ms=fallback_delay_ms
    )
    return ContentClient(
        transport, base_url=base_url, token=token, affiliation=affiliation
    )


def create_content_client_from_settings(settings: Settings) -> ContentClientProtocol:
    """
    Create a contents client using application settings.

    Args:
        settings: Application settings

    Returns:
        ContentClientProtocol implementation
    """
    return create_content_client(
        base_url=settings.GITHUB_API_URL,
        token=settings.GITHUB_TOKEN,
        timeout_ms=settings.REQUEST_TIMEOUT_MS,
        retries=settings.RATE_LIMIT_RETRIES,
        fallback_delay_ms=settings.RATE_LIMIT_FALLBACK_DELAY_MS,
        affiliation=settings.REPO_AFFILIATION,
        debug_mode=settings.DEBUG,
    )
