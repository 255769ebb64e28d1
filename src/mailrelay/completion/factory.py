"""
Factory for creating completion provider instances.
"""

from mailrelay.completion.interface import CompletionProvider
from mailrelay.completion.mock_adapter import MockCompletionProvider
from mailrelay.completion.models import CompletionProviderType
from mailrelay.completion.openrouter_adapter import OpenRouterAdapter
from mailrelay.config import Settings
from mailrelay.shared.logging import get_logger, mask_secret

logger = get_logger(__name__)


def create_completion_provider(settings: Settings) -> CompletionProvider:
    """Create the completion provider selected by configuration.

    Args:
        settings: Application settings.

    Returns:
        CompletionProvider instance.

    Raises:
        ValueError: If the configured provider type is not supported.
    """
    provider_type = CompletionProviderType(settings.llm_provider)

    logger.info(
        "Completion provider config resolved",
        extra={
            "provider": provider_type.value,
            "model": settings.llm_model,
            "base_url": settings.openrouter_base_url,
            "api_key": mask_secret(settings.openrouter_api_key, keep=10),
            "timeout_seconds": settings.llm_timeout_seconds,
        },
    )

    if provider_type == CompletionProviderType.OPENROUTER:
        if not settings.openrouter_api_key:
            logger.warning("OPENROUTER_API_KEY is empty; /api/generate will fail until it is set")
        return OpenRouterAdapter(
            api_key=settings.openrouter_api_key,
            default_model=settings.llm_model,
            timeout_seconds=settings.llm_timeout_seconds,
            base_url=settings.openrouter_base_url,
        )

    if provider_type == CompletionProviderType.MOCK:
        return MockCompletionProvider(default_model=settings.llm_model)

    raise ValueError(f"Unsupported completion provider: {provider_type}")
