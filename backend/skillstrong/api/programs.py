"""REST API for training programs."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from skillstrong.api.deps import get_store
from skillstrong.models.listings import Program
from skillstrong.services.listings import ListingsStore, ProgramFilters

router = APIRouter()


class ProgramCreate(BaseModel):
    school: str
    title: str
    location: str
    delivery: Literal["in-person", "online", "hybrid"] = "in-person"
    length_weeks: int | None = None
    cost: float | None = None
    certs: list[str] = []
    start_date: str | None = None
    url: str | None = None
    external_url: str | None = None
    description: str | None = None
    featured: bool = False


@router.get("")
async def list_programs(
    q: str | None = None,
    metro: str | None = None,
    delivery: str | None = None,
    max_weeks: int | None = None,
    max_cost: float | None = None,
    require_url: bool = False,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    store: ListingsStore = Depends(get_store),
):
    filters = ProgramFilters(
        keywords=(q or "").split(),
        metro=metro,
        delivery=delivery,
        max_length_weeks=max_weeks,
        max_cost=max_cost,
        require_url=require_url,
        limit=limit,
        offset=(page - 1) * limit,
    )
    programs, count = store.search_programs(filters)
    return {"programs": programs, "count": count, "page": page, "limit": limit}


@router.get("/metros")
async def program_metros(store: ListingsStore = Depends(get_store)):
    """Preferred metros that at least one program is located in."""
    return {"metros": store.program_metros()}


@router.get("/trends")
async def program_trends(store: ListingsStore = Depends(get_store)):
    return store.program_trends()


@router.get("/{program_id}")
async def get_program(program_id: int, store: ListingsStore = Depends(get_store)):
    program = store.get_program(program_id)
    if not program:
        raise HTTPException(status_code=404, detail="Program not found")
    return program


@router.post("")
async def create_program(body: ProgramCreate, store: ListingsStore = Depends(get_store)):
    program = store.add_program(Program(**body.model_dump()))
    return {"program": program}
