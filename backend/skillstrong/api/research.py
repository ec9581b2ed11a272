"""Web research endpoints: vertical RAG answers and a raw search passthrough."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from skillstrong.api.deps import get_fetcher, get_llm, get_search
from skillstrong.services.coach.research import research
from skillstrong.services.integrations.search import SearchError, SearchService, Vertical
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.llm import BaseLLMProvider

router = APIRouter()
logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    query: str = ""


@router.get("/research")
async def vertical_research(
    q: str = "",
    zip: str | None = None,
    action: Vertical = "search_web",
    llm: BaseLLMProvider | None = Depends(get_llm),
    search: SearchService = Depends(get_search),
    fetcher: PageFetcher = Depends(get_fetcher),
):
    if not q.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required.")
    if llm is None:
        raise HTTPException(status_code=503, detail="No LLM provider configured")
    return await research(llm, search, fetcher, q.strip(), zip_code=zip, action=action)


@router.post("/search")
async def raw_search(body: SearchRequest, search: SearchService = Depends(get_search)):
    """Top five results with a title, link and snippet."""
    if not body.query.strip():
        raise HTTPException(status_code=400, detail="Query parameter is required.")
    if not search.is_configured:
        raise HTTPException(status_code=503, detail="Search API is not configured.")
    try:
        items = await search.search(body.query, num=10)
    except SearchError as e:
        logger.error(f"Search passthrough failed: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch search results.")
    results = [
        {"title": item.title, "link": item.url, "snippet": item.snippet}
        for item in items
        if item.title and item.url and item.snippet
    ]
    return results[:5]
