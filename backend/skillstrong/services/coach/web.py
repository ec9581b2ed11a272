"""Web augmentation: decide whether a draft needs current external facts, then cite them.

The model writes the prose; the Sources list is always built here from the pages
that were actually fetched, never from what the model claims to cite.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from skillstrong.services.coach.heuristics import has_time_sensitive_terms, is_pure_overview
from skillstrong.services.integrations.search import SearchError, SearchService, authoritative_query
from skillstrong.services.integrations.web import PageFetcher, ReadablePage
from skillstrong.services.llm import BaseLLMProvider, Message

logger = logging.getLogger(__name__)

MAX_PAGES = 3
MAX_PAGE_CHARS = 3000

DECISION_PROMPT = """You review a draft answer from a manufacturing career coach.
Decide whether a good answer needs CURRENT external facts the draft cannot know:
local job openings, current wages, tuition, program dates, or recent statistics.
Answer with exactly one word: YES or NO."""

SYNTHESIS_PROMPT = """You are a manufacturing careers guide. Answer the user's question using ONLY the numbered sources provided.
- Write concise Markdown (headings, short lists, 120-250 words).
- Cite facts inline as [#1], [#2] matching the source numbers.
- Never invent URLs, numbers or employers that are not in the sources.
- Do not add a sources or references list; it is appended for you."""


@dataclass
class WebAugmentation:
    answer: str
    sources: list[ReadablePage] = field(default_factory=list)


async def should_augment(llm: BaseLLMProvider, query: str, draft: str, internal_context: str) -> bool:
    if internal_context:
        return False
    if is_pure_overview(query):
        return False
    if has_time_sensitive_terms(query):
        return True

    try:
        response = await llm.chat(
            [
                Message(role="system", content=DECISION_PROMPT),
                Message(role="user", content=f"Question: {query}\n\nDraft answer:\n{draft}"),
            ],
            temperature=0,
            max_tokens=3,
        )
    except Exception as e:
        logger.warning(f"Web augmentation decision failed, skipping: {e}")
        return False
    return (response.content or "").strip().upper().startswith("YES")


async def fetch_pages(fetcher: PageFetcher, urls: list[str]) -> list[ReadablePage]:
    """Fetch pages concurrently, keeping request order and dropping failures."""
    results = await asyncio.gather(*(fetcher.fetch_readable(u) for u in urls), return_exceptions=True)
    pages = []
    for url, result in zip(urls, results):
        if isinstance(result, ReadablePage):
            pages.append(result)
        elif isinstance(result, BaseException):
            logger.debug(f"Dropping {url}: {result}")
    return pages


def render_sources(pages: list[ReadablePage]) -> str:
    lines = ["**Sources**"]
    lines.extend(f"{i}. [{p.title}]({p.url})" for i, p in enumerate(pages, start=1))
    return "\n".join(lines)


def build_source_context(pages: list[ReadablePage]) -> str:
    return "\n\n".join(
        f"[#{i}] {p.title}\nURL: {p.url}\n{p.text[:MAX_PAGE_CHARS]}"
        for i, p in enumerate(pages, start=1)
    )


async def augment_with_web(
    llm: BaseLLMProvider,
    search: SearchService,
    fetcher: PageFetcher,
    query: str,
    location: str | None = None,
) -> WebAugmentation | None:
    """Search, read the top results and synthesize a cited answer. None if nothing usable came back."""
    try:
        results = await search.search(authoritative_query(query, location), num=6)
    except SearchError as e:
        logger.warning(f"Web search failed: {e}")
        return None

    pages = await fetch_pages(fetcher, [r.url for r in results[:MAX_PAGES]])
    if not pages:
        logger.info(f"No pages fetched for {query!r}; keeping the draft answer")
        return None

    try:
        response = await llm.chat(
            [
                Message(role="system", content=SYNTHESIS_PROMPT),
                Message(
                    role="user",
                    content=(
                        f"User question: {query}\n"
                        + (f"User location: {location}\n" if location else "")
                        + f"\nSources:\n\n{build_source_context(pages)}"
                    ),
                ),
            ],
            temperature=0.2,
        )
    except Exception as e:
        logger.warning(f"Web synthesis failed, keeping the draft answer: {e}")
        return None

    prose = (response.content or "").strip()
    if not prose:
        return None

    logger.info(f"Web augmentation used {len(pages)} source(s) for {query!r}")
    return WebAugmentation(answer=f"{prose}\n\n{render_sources(pages)}", sources=pages)
