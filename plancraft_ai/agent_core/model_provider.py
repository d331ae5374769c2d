"""Language model construction for the model gateway.

Maps the configured provider name to the matching Pydantic AI model class.
API keys come from ``ModelConfig``; when a key is not configured the provider
SDK falls back to its usual environment variable.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import SecretStr
from pydantic_ai import ModelSettings
from pydantic_ai.models import Model
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIResponsesModel
from pydantic_ai.providers.anthropic import AnthropicProvider
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.openai import OpenAIProvider

from plancraft_ai.server.core.config import ModelConfig

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "anthropic", "google")


def _secret(value: Optional[SecretStr]) -> Optional[str]:
    return value.get_secret_value() if value else None


def create_model(config: ModelConfig) -> Model:
    """
    Create a Pydantic AI model from configuration.

    Args:
        config: Provider, model name, sampling settings and API keys.

    Returns:
        A ready-to-use Pydantic AI ``Model``.

    Raises:
        ValueError: If the provider is not one of ``SUPPORTED_PROVIDERS``.
    """
    provider = config.provider.lower()
    model_settings = ModelSettings(temperature=config.temperature, max_tokens=config.max_tokens)
    logger.debug(f"Creating {provider} model: {config.name}")

    if provider == "openai":
        api_key = _secret(config.openai_api_key)
        return OpenAIResponsesModel(
            config.name,
            provider=OpenAIProvider(api_key=api_key) if api_key else "openai",
            settings=model_settings,
        )
    if provider == "anthropic":
        api_key = _secret(config.anthropic_api_key)
        return AnthropicModel(
            config.name,
            provider=AnthropicProvider(api_key=api_key) if api_key else "anthropic",
            settings=model_settings,
        )
    if provider == "google":
        api_key = _secret(config.google_api_key)
        return GoogleModel(
            config.name,
            provider=GoogleProvider(api_key=api_key) if api_key else "google-gla",
            settings=model_settings,
        )
    raise ValueError(f"Unsupported provider: {config.provider}")
