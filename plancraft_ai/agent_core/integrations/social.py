from __future__ import annotations

"""Social platform clients (LinkedIn, Facebook Graph, TikTok).

Credentials are per project and passed on every call; the clients only hold
the shared HTTP client and deployment-level base URLs.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from .http import json_body, send

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkedInClient:
    client: httpx.AsyncClient
    api_url: str = "https://api.linkedin.com/v2"

    async def create_post(self, *, access_token: str, user_id: str, content: str) -> Dict[str, Any]:
        """Publish a public text share through the UGC Posts API."""
        payload = {
            "author": f"urn:li:person:{user_id}",
            "lifecycleState": "PUBLISHED",
            "specificContent": {
                "com.linkedin.ugc.ShareContent": {
                    "shareCommentary": {"text": content},
                    "shareMediaCategory": "NONE",
                }
            },
            "visibility": {"com.linkedin.ugc.MemberNetworkVisibility": "PUBLIC"},
        }
        response = await send(
            self.client,
            "POST",
            f"{self.api_url.rstrip('/')}/ugcPosts",
            operation="linkedin.create_post",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
                "X-Restli-Protocol-Version": "2.0.0",
            },
            json=payload,
        )
        post_id = response.headers.get("x-restli-id")
        body = json_body(response, operation="linkedin.create_post") if response.content else {}
        return {"id": post_id or (body.get("id") if isinstance(body, dict) else None)}


@dataclass(frozen=True)
class FacebookGraphClient:
    client: httpx.AsyncClient
    graph_api_url: str = "https://graph.facebook.com/v18.0"

    def _url(self, *parts: str) -> str:
        return "/".join([self.graph_api_url.rstrip("/"), *parts])

    async def search_posts(self, *, target: str, access_token: str, keywords: str = "") -> Dict[str, Any]:
        """List posts of a page, filtered by keywords when given."""
        params = {"fields": "id,message,from,created_time", "access_token": access_token}
        if keywords:
            params["q"] = keywords
        response = await send(
            self.client, "GET", self._url(target, "posts"), operation="facebook.search_posts", params=params
        )
        return json_body(response, operation="facebook.search_posts")

    async def create_post(
        self,
        *,
        page_id: str,
        access_token: str,
        message: str,
        media_url: Optional[str] = None,
        media_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Publish to the page feed, or to ``photos``/``videos`` when media is attached."""
        data: Dict[str, Any] = {"access_token": access_token}
        if media_type == "image":
            edge = "photos"
            data.update({"caption": message, "url": media_url})
        elif media_type == "video":
            edge = "videos"
            data.update({"description": message, "file_url": media_url})
        else:
            edge = "feed"
            data["message"] = message
        response = await send(
            self.client, "POST", self._url(page_id, edge), operation="facebook.create_post", data=data
        )
        return json_body(response, operation="facebook.create_post")


@dataclass(frozen=True)
class TikTokClient:
    client: httpx.AsyncClient
    api_url: str = "https://open.tiktokapis.com/v2"

    async def search_videos(self, *, query: str, access_token: Optional[str] = None) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"
        else:
            logger.warning("TikTok search without a project access token; relying on public access")
        response = await send(
            self.client,
            "POST",
            f"{self.api_url.rstrip('/')}/research/video/query/",
            operation="tiktok.search_videos",
            headers=headers,
            params={"fields": "id,video_description,username,create_time"},
            json={"query": {"and": [{"operation": "IN", "field_name": "keyword", "field_values": [query]}]}},
        )
        return json_body(response, operation="tiktok.search_videos")

    async def publish_video(self, *, access_token: str, caption: str, video_url: str) -> Dict[str, Any]:
        response = await send(
            self.client,
            "POST",
            f"{self.api_url.rstrip('/')}/post/publish/video/init/",
            operation="tiktok.publish_video",
            headers={"Authorization": f"Bearer {access_token}", "Content-Type": "application/json"},
            json={
                "post_info": {"title": caption, "privacy_level": "PUBLIC_TO_EVERYONE"},
                "source_info": {"source": "PULL_FROM_URL", "video_url": video_url},
            },
        )
        return json_body(response, operation="tiktok.publish_video")
