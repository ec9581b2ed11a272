"""REST API for job listings."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from skillstrong.api.deps import get_store
from skillstrong.models.listings import Job
from skillstrong.services.listings import JobFilters, ListingsStore

router = APIRouter()


class JobCreate(BaseModel):
    title: str
    company: str
    location: str
    description: str | None = None
    skills: list[str] = []
    pay_min: float | None = None
    pay_max: float | None = None
    apprenticeship: bool = False
    external_url: str | None = None
    apply_url: str | None = None
    featured: bool = False


def _split(value: str | None) -> list[str]:
    return [part.strip() for part in (value or "").split(",") if part.strip()]


@router.get("")
async def list_jobs(
    q: str | None = None,
    city: str | None = None,
    state: str | None = None,
    location: str | None = None,
    skills: str | None = None,
    pay_min: float | None = None,
    pay_max: float | None = None,
    apprenticeship: bool | None = None,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    store: ListingsStore = Depends(get_store),
):
    """List jobs. `q` is split on whitespace and OR'd; `skills` is comma-separated and AND'd."""
    filters = JobFilters(
        keywords=(q or "").split(),
        city=city,
        state=state,
        location=location,
        skills=_split(skills),
        pay_min=pay_min,
        pay_max=pay_max,
        apprenticeship=apprenticeship,
        limit=limit,
        offset=offset,
    )
    return {"jobs": store.search_jobs(filters)}


@router.get("/trends")
async def job_trends(store: ListingsStore = Depends(get_store)):
    return store.job_trends()


@router.get("/{job_id}")
async def get_job(job_id: int, store: ListingsStore = Depends(get_store)):
    job = store.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job


@router.post("")
async def create_job(body: JobCreate, store: ListingsStore = Depends(get_store)):
    job = store.add_job(Job(**body.model_dump()))
    return {"job": job}
