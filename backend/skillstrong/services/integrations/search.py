"""Google Custom Search integration plus query templates biased to authoritative sites."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Literal

import httpx

from skillstrong.core.config import settings

logger = logging.getLogger(__name__)

Vertical = Literal["search_web", "search_training", "search_jobs", "pay", "outlook"]

AUTHORITATIVE_SITES = ["bls.gov", "onetonline.org", "*.edu", "careeronestop.org"]
JUNK_SITES = ["pinterest.com", "quora.com", "reddit.com", "facebook.com", "tiktok.com", "youtube.com"]


class SearchError(Exception):
    pass


@dataclass
class SearchResult:
    title: str
    url: str
    snippet: str = ""
    display_link: str = ""


def authoritative_query(base: str, location: str | None = None) -> str:
    """Bias a free-text query toward government/education sources and away from social sites."""
    near = f" {location}" if location else ""
    include = " OR ".join(f"site:{s}" for s in AUTHORITATIVE_SITES)
    exclude = " ".join(f"-site:{s}" for s in JUNK_SITES)
    return f"{base.strip()}{near} ({include}) {exclude}"


def template_query(action: str, base: str, zip_code: str | None = None) -> str:
    near = f" near {zip_code}" if zip_code else ""
    if action == "search_training":
        return (
            f"({base}) (certificate OR training OR apprenticeship){near} "
            "site:*.edu OR site:careeronestop.org OR site:apprenticeship.gov"
        )
    if action == "search_jobs":
        return f'"{base}" job openings{near} site:indeed.com OR site:ziprecruiter.com OR site:linkedin.com/jobs'
    if action == "pay":
        return f"{base} wages OR salary site:bls.gov/ooh OR site:onetonline.org"
    if action == "outlook":
        return f"{base} employment outlook site:bls.gov/ooh OR site:onetonline.org"
    return f"{base} site:bls.gov OR site:onetonline.org OR site:careeronestop.org"


class SearchService:
    """Google Programmable Search (Custom Search JSON API) client."""

    BASE_URL = "https://www.googleapis.com/customsearch/v1"

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._key = settings.google_cse_key
        self._cx = settings.google_cse_id
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._key and self._cx)

    async def search(self, query: str, num: int = 6) -> list[SearchResult]:
        if not self.is_configured:
            raise SearchError("Search not configured. Set SKILLSTRONG_GOOGLE_CSE_KEY and SKILLSTRONG_GOOGLE_CSE_ID.")

        params = {"key": self._key, "cx": self._cx, "q": query, "num": min(max(num, 1), 10)}
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=10.0) as client:
                resp = await client.get(self.BASE_URL, params=params)
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise SearchError(f"Custom Search request failed: {e}") from e

        results = []
        for item in data.get("items") or []:
            link = item.get("link")
            if not link:
                continue
            results.append(SearchResult(
                title=item.get("title") or link,
                url=link,
                snippet=item.get("snippet") or "",
                display_link=item.get("displayLink") or "",
            ))
        return results

    async def search_many(self, queries: list[str], per_query: int = 4) -> list[SearchResult]:
        """Run queries one after another, pausing between calls. Per-query errors are skipped."""
        results: list[SearchResult] = []
        for q in queries:
            try:
                results.extend(await self.search(q, per_query))
            except SearchError as e:
                logger.warning(f"Search failed for {q!r}: {e}")
                continue
            await asyncio.sleep(settings.ingest_delay_seconds)
        return results
