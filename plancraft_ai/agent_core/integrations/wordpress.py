from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

import httpx

from .http import json_body, send


def rest_base(site_url: str) -> str:
    """Return the REST API root of a WordPress site, appending ``/wp-json`` when missing."""
    base = site_url.rstrip("/")
    return base if base.endswith("/wp-json") else f"{base}/wp-json"


@dataclass(frozen=True)
class WordPressClient:
    """Create posts through the WordPress REST API using an application password."""

    client: httpx.AsyncClient

    async def create_draft(
        self, *, site_url: str, username: str, application_password: str, title: str, content: str
    ) -> Dict[str, Any]:
        response = await send(
            self.client,
            "POST",
            f"{rest_base(site_url)}/wp/v2/posts",
            operation="wordpress.create_draft",
            auth=(username, application_password),
            json={"title": title, "content": content, "status": "draft"},
        )
        body = json_body(response, operation="wordpress.create_draft")
        return {
            "id": body.get("id"),
            "status": body.get("status", "draft"),
            "link": body.get("link"),
        }
