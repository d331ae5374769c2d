from __future__ import annotations

"""Clients for the image/video generation and embedding services.

Both services are plain JSON-over-HTTP endpoints configured per deployment
(``IMAGE_GENERATION_API_URL``, ``VIDEO_GENERATION_API_URL``,
``EMBEDDING_API_URL``). They authenticate with a bearer key.
"""

from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .errors import IntegrationError, IntegrationNotConfiguredError
from .http import json_body, send


def _bearer(api_key: Optional[str]) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers


@dataclass(frozen=True)
class MediaGenerationClient:
    """POST ``{"prompt": ...}`` to a generation endpoint and read back the media URL."""

    client: httpx.AsyncClient
    image_api_url: Optional[str] = None
    video_api_url: Optional[str] = None
    api_key: Optional[str] = None

    async def generate_image(self, prompt: str) -> str:
        return await self._generate("Image generation service", self.image_api_url, prompt, "image_url")

    async def generate_video(self, prompt: str) -> str:
        return await self._generate("Video generation service", self.video_api_url, prompt, "video_url")

    async def _generate(self, label: str, endpoint: Optional[str], prompt: str, url_key: str) -> str:
        if not endpoint:
            raise IntegrationNotConfiguredError(label)
        operation = f"{label.split()[0].lower()}_generation"
        response = await send(
            self.client, "POST", endpoint, operation=operation, headers=_bearer(self.api_key), json={"prompt": prompt}
        )
        data = json_body(response, operation=operation)
        url = (data.get("url") or data.get(url_key)) if isinstance(data, dict) else None
        if not url:
            raise IntegrationError(
                f"Failed to retrieve {label.split()[0].lower()} URL from generation service.", details=data
            )
        return str(url)


@dataclass(frozen=True)
class EmbeddingClient:
    """Turn text into an embedding vector.

    Accepts both OpenAI-style responses (``{"data": [{"embedding": [...]}]}``)
    and flat ones (``{"embedding": [...]}``).
    """

    client: httpx.AsyncClient
    api_url: Optional[str] = None
    api_key: Optional[str] = None
    model: str = "text-embedding-3-small"

    async def embed(self, text: str) -> list[float]:
        if not self.api_url:
            raise IntegrationNotConfiguredError("Embedding service")
        response = await send(
            self.client,
            "POST",
            self.api_url,
            operation="embedding",
            headers=_bearer(self.api_key),
            json={"input": text, "model": self.model},
        )
        data = json_body(response, operation="embedding")
        vector = _extract_vector(data)
        if not vector:
            raise IntegrationError("Embedding service returned no vector.", details=data)
        return [float(v) for v in vector]


def _extract_vector(data: Any) -> Optional[list]:
    if not isinstance(data, dict):
        return None
    if isinstance(data.get("embedding"), list):
        return data["embedding"]
    items = data.get("data")
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("embedding")
    return None
