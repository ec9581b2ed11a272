"""Admin endpoints for listings ingestion and maintenance.

Each endpoint takes an optional `secret` query parameter checked against
SKILLSTRONG_ADMIN_SECRET when that is set.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from skillstrong.api.deps import get_fetcher, get_scorecard, get_search, get_store
from skillstrong.core.auth import require_admin
from skillstrong.services import ingest
from skillstrong.services.integrations.scorecard import ScorecardError, ScorecardService
from skillstrong.services.integrations.search import SearchError, SearchService
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.listings import ListingsStore

router = APIRouter()
logger = logging.getLogger(__name__)


class JobIngestRequest(BaseModel):
    queries: list[str] | None = None
    max_per_query: int = 6
    featured: bool = False


class ScorecardIngestRequest(BaseModel):
    cip4: str = ""
    states: list[str] | None = None
    pages: int = 2
    per_page: int = 100
    featured: bool = False


@router.post("/ingest/jobs/cse")
async def ingest_jobs(
    body: JobIngestRequest | None = None,
    secret: str | None = None,
    store: ListingsStore = Depends(get_store),
    search: SearchService = Depends(get_search),
):
    require_admin(secret)
    body = body or JobIngestRequest()
    try:
        jobs = await ingest.ingest_jobs_from_search(
            store, search, queries=body.queries, max_per_query=body.max_per_query, featured=body.featured
        )
    except SearchError as e:
        logger.error(f"Job ingest failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True, "inserted": len(jobs)}


@router.post("/ingest/programs/scorecard")
async def ingest_programs(
    body: ScorecardIngestRequest,
    secret: str | None = None,
    store: ListingsStore = Depends(get_store),
    scorecard: ScorecardService = Depends(get_scorecard),
):
    require_admin(secret)
    if not body.cip4.strip():
        raise HTTPException(status_code=400, detail="cip4 is required, e.g. 4805")
    try:
        programs = await ingest.ingest_programs_from_scorecard(
            store,
            scorecard,
            body.cip4.strip(),
            states=body.states,
            pages=body.pages,
            per_page=min(body.per_page, 100),
            featured=body.featured,
        )
    except ScorecardError as e:
        logger.error(f"Scorecard ingest failed: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    return {"ok": True, "inserted": len(programs)}


@router.post("/maintenance/programs/clear")
async def clear_programs(secret: str | None = None, store: ListingsStore = Depends(get_store)):
    require_admin(secret)
    return {"ok": True, "deleted": store.clear_programs()}


@router.post("/maintenance/programs/backfill-titles")
async def backfill_titles(secret: str | None = None, store: ListingsStore = Depends(get_store)):
    require_admin(secret)
    return {"ok": True, "updated": ingest.backfill_program_titles(store)}


@router.post("/maintenance/programs/enrich")
async def enrich_programs(
    limit: int = 60,
    secret: str | None = None,
    store: ListingsStore = Depends(get_store),
    search: SearchService = Depends(get_search),
    fetcher: PageFetcher = Depends(get_fetcher),
):
    require_admin(secret)
    if not search.is_configured:
        raise HTTPException(status_code=503, detail="Search API is not configured.")
    updated = await ingest.enrich_programs(store, search, fetcher, limit=limit)
    return {"ok": True, "updated": updated}
