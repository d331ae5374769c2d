from __future__ import annotations

import pytest
from pydantic_ai.models.anthropic import AnthropicModel
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.openai import OpenAIResponsesModel

from plancraft_ai.agent_core.model_provider import SUPPORTED_PROVIDERS, create_model
from plancraft_ai.server.core.config import ModelConfig


@pytest.mark.parametrize(
    "provider,key_field,model_name,model_cls",
    [
        ("openai", "openai_api_key", "gpt-4o", OpenAIResponsesModel),
        ("anthropic", "anthropic_api_key", "claude-3-5-sonnet-latest", AnthropicModel),
        ("google", "google_api_key", "gemini-2.0-flash", GoogleModel),
    ],
)
def test_create_model_per_provider(provider, key_field, model_name, model_cls) -> None:
    config = ModelConfig(provider=provider, name=model_name, **{key_field: "test-key"})

    model = create_model(config)

    assert isinstance(model, model_cls)
    assert model.model_name == model_name
    assert model.settings["temperature"] == config.temperature
    assert model.settings["max_tokens"] == config.max_tokens


def test_provider_name_is_case_insensitive() -> None:
    model = create_model(ModelConfig(provider="OpenAI", name="gpt-4o-mini", openai_api_key="test-key"))
    assert isinstance(model, OpenAIResponsesModel)


def test_unsupported_provider() -> None:
    assert "mistral" not in SUPPORTED_PROVIDERS
    with pytest.raises(ValueError, match="Unsupported provider: mistral"):
        create_model(ModelConfig(provider="mistral", name="m"))
