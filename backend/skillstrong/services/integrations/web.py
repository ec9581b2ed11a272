"""Readable-page extraction for web augmentation and research."""

import logging
import re
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

from skillstrong.core.config import settings

logger = logging.getLogger(__name__)

MAX_LINES = 300
CLEANUP_TAGS = ["script", "style", "nav", "footer", "noscript"]


@dataclass
class ReadablePage:
    title: str
    url: str
    text: str
    image: str = ""


def extract_readable(html: str, url: str) -> ReadablePage:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(CLEANUP_TAGS):
        tag.decompose()

    og_title = soup.find("meta", attrs={"property": "og:title"})
    title = (og_title.get("content") if og_title else None) or (
        soup.title.get_text(strip=True) if soup.title else ""
    )

    og_image = soup.find("meta", attrs={"property": "og:image"}) or soup.find("meta", attrs={"name": "og:image"})
    image = (og_image.get("content") if og_image else "") or ""

    text = ""
    for selector in ("main", "article", "body"):
        node = soup.find(selector)
        if node:
            text = node.get_text("\n").strip()
            if text:
                break
    if not text:
        text = soup.get_text("\n").strip()

    text = text.replace("\r", "")
    text = re.sub(r"[ \t]+", " ", text)
    lines = [line.strip() for line in text.split("\n") if line.strip()]

    return ReadablePage(title=title or url, url=url, text="\n".join(lines[:MAX_LINES]), image=image)


class PageFetcher:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._transport = transport

    async def fetch_html(self, url: str) -> str | None:
        try:
            async with httpx.AsyncClient(transport=self._transport, follow_redirects=True, timeout=15.0) as client:
                response = await client.get(url, headers={"User-Agent": settings.http_user_agent})
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            logger.debug(f"Fetch failed for {url}: {e}")
            return None

    async def fetch_readable(self, url: str) -> ReadablePage | None:
        """Fetch a page and return its readable text, or None on any failure."""
        html = await self.fetch_html(url)
        if html is None:
            return None
        try:
            return extract_readable(html, url)
        except Exception as e:
            logger.debug(f"Could not parse {url}: {e}")
            return None
