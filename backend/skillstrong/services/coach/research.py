"""Stand-alone research answers: templated search, top pages, JSON synthesis."""

import logging
from typing import Any

from pydantic import BaseModel

from skillstrong.services.coach.web import MAX_PAGES, build_source_context, fetch_pages
from skillstrong.services.integrations.search import SearchError, SearchService, template_query
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.llm import BaseLLMProvider, Message
from skillstrong.services.llm.parsing import Unparseable, parse_llm_json

logger = logging.getLogger(__name__)

RESEARCH_PROMPT = """You are a manufacturing careers guide. Synthesize from the provided sources only.
Return JSON:
{
  "answer_markdown": string,
  "citations": [{"title": string, "url": string}],
  "followups": [string],
  "images": [{"url": string, "caption": string}]
}
- answer_markdown uses headings, lists and short paragraphs (180-260 words).
- Prefer BLS, O*NET, CareerOneStop, Apprenticeship.gov and *.edu sources.
- Cite with [1], [2] markers in the order of the citations array.
- followups: 3-6 natural next questions.
- Do NOT invent URLs. Use only the provided URLs."""

NO_SOURCES_FOLLOWUPS = ["What roles match my interests?", "Show certificates near me", "What does it pay?"]
DEFAULT_FOLLOWUPS = ["What does it pay?", "Entry certifications", "Apprenticeships near me"]


class Citation(BaseModel):
    title: str = ""
    url: str


class Image(BaseModel):
    url: str
    caption: str = ""


class ResearchPayload(BaseModel):
    answer_markdown: str = ""
    citations: list[Citation] = []
    followups: list[str] = []
    images: list[Image] = []


def _no_sources() -> dict[str, Any]:
    return {
        "answer_markdown": "I couldn't find sources right now. Try another query or check your web search keys.",
        "citations": [],
        "followups": list(NO_SOURCES_FOLLOWUPS),
        "images": [],
    }


async def research(
    llm: BaseLLMProvider,
    search: SearchService,
    fetcher: PageFetcher,
    query: str,
    zip_code: str | None = None,
    action: str = "search_web",
) -> dict[str, Any]:
    try:
        results = await search.search(template_query(action, query, zip_code), num=6)
    except SearchError as e:
        logger.warning(f"Research search failed: {e}")
        return _no_sources()
    if not results:
        return _no_sources()

    top = results[:MAX_PAGES]
    pages = await fetch_pages(fetcher, [r.url for r in top])
    fetched_urls = {p.url for p in pages}

    payload = ResearchPayload()
    if pages:
        try:
            response = await llm.chat(
                [
                    Message(role="system", content=RESEARCH_PROMPT),
                    Message(
                        role="user",
                        content=f"User query: {query}\n\n{build_source_context(pages)}\n\nCreate the JSON as specified.",
                    ),
                ],
                temperature=0.3,
                json_mode=True,
            )
            parsed = parse_llm_json(response.content, ResearchPayload)
            if isinstance(parsed, Unparseable):
                logger.debug(f"Unparseable research payload ({parsed.reason})")
            else:
                payload = parsed
        except Exception as e:
            logger.warning(f"Research synthesis failed: {e}")

    # Only URLs we actually fetched may be shown as citations
    citations = [c.model_dump() for c in payload.citations if c.url in fetched_urls]
    if not citations:
        citations = [{"title": r.title, "url": r.url} for r in top]

    images = [i.model_dump() for i in payload.images if i.url]
    if not images:
        images = [{"url": p.image, "caption": p.title} for p in pages if p.image]

    followups = [f.strip() for f in payload.followups if f.strip()][:6] or list(DEFAULT_FOLLOWUPS)

    return {
        "answer_markdown": payload.answer_markdown or "Here is a summary.",
        "citations": citations,
        "followups": followups,
        "images": images,
    }
