from __future__ import annotations

"""Readable-text extraction for the browse_web tool.

The URL comes from the language model, so ``WebPageReader`` only fetches
public hosts: loopback, private, link-local and otherwise non-global
addresses are refused, both as literals and after DNS resolution, and
redirects are re-checked hop by hop. Bodies are streamed and cut at
``max_bytes``.
"""

import asyncio
import ipaddress
import logging
import socket
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List
from urllib.parse import urljoin, urlparse

import httpx
from bs4 import BeautifulSoup

from .errors import IntegrationError

logger = logging.getLogger(__name__)

_NON_CONTENT_TAGS = ("script", "style", "noscript", "svg", "header", "footer", "nav")

Resolver = Callable[[str], Awaitable[List[str]]]


def extract_text(html: str, *, max_chars: int) -> Dict[str, str]:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NON_CONTENT_TAGS):
        tag.decompose()
    title = soup.title.get_text(strip=True) if soup.title else ""
    text = " ".join(soup.get_text(separator=" ").split())
    return {"title": title, "text": text[:max_chars]}


async def resolve_addresses(host: str) -> List[str]:
    """Resolve ``host`` to its IP addresses; an unresolvable host yields ``[]``."""
    try:
        infos = await asyncio.get_running_loop().getaddrinfo(host, None, type=socket.SOCK_STREAM)
    except socket.gaierror:
        return []
    return [info[4][0] for info in infos]


def _is_public(address: str) -> bool:
    try:
        ip = ipaddress.ip_address(address.split("%", 1)[0])
    except ValueError:
        return False
    return ip.is_global and not ip.is_multicast


@dataclass(frozen=True)
class WebPageReader:
    client: httpx.AsyncClient
    max_chars: int = 3000
    max_bytes: int = 2_000_000
    max_redirects: int = 5
    resolver: Resolver = resolve_addresses

    async def read(self, url: str) -> Dict[str, Any]:
        for _ in range(self.max_redirects + 1):
            await self._ensure_public(url)
            response, body = await self._fetch(url)
            if response.is_redirect and "location" in response.headers:
                url = urljoin(url, response.headers["location"])
                continue
            break
        else:
            raise IntegrationError(f"browse_web failed: more than {self.max_redirects} redirects")

        content_type = response.headers.get("content-type", "")
        if "html" not in content_type and "text" not in content_type:
            raise IntegrationError(f"Unsupported content type for browsing: {content_type or 'unknown'}")
        text = body.decode(response.encoding or "utf-8", errors="replace")
        page = extract_text(text, max_chars=self.max_chars)
        return {"url": url, **page}

    async def _ensure_public(self, url: str) -> None:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise IntegrationError(f"Only absolute http(s) URLs can be browsed: {url!r}")
        host = parsed.hostname.lower()
        if host == "localhost" or host.endswith(".localhost"):
            raise IntegrationError(f"Refusing to browse non-public host: {host}")
        try:
            ipaddress.ip_address(host)
            addresses = [host]
        except ValueError:
            addresses = await self.resolver(host)
        blocked = [a for a in addresses if not _is_public(a)]
        if blocked:
            raise IntegrationError(f"Refusing to browse non-public host: {host} ({', '.join(blocked)})")

    async def _fetch(self, url: str) -> tuple[httpx.Response, bytes]:
        logger.debug("browse_web: GET %s", url)
        chunks: List[bytes] = []
        size = 0
        try:
            async with self.client.stream(
                "GET", url, headers={"User-Agent": "PlanCraft-AI"}, follow_redirects=False
            ) as response:
                if response.is_redirect:
                    return response, b""
                response.raise_for_status()
                async for chunk in response.aiter_bytes():
                    chunks.append(chunk)
                    size += len(chunk)
                    if size >= self.max_bytes:
                        logger.debug("browse_web: body of %s cut at %d bytes", url, self.max_bytes)
                        break
        except httpx.HTTPStatusError as e:
            raise IntegrationError(
                f"browse_web failed: API Error {e.response.status_code}", status_code=e.response.status_code
            ) from e
        except httpx.RequestError as e:
            raise IntegrationError(f"browse_web failed: network error ({type(e).__name__}: {e})") from e
        return response, b"".join(chunks)[: self.max_bytes]
