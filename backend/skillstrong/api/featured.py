"""REST API for curated featured placements."""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from skillstrong.api.deps import get_store
from skillstrong.models.listings import Featured
from skillstrong.services.listings import ListingsStore

router = APIRouter()


class FeaturedCreate(BaseModel):
    kind: Literal["job", "program"]
    ref_id: int
    category_hint: str | None = None
    metro_hint: str | None = None


@router.get("")
async def list_featured(
    kind: Literal["job", "program"] | None = None, store: ListingsStore = Depends(get_store)
):
    items = []
    for item in store.list_featured(kind=kind):
        target = store.resolve_featured(item)
        items.append({**item.model_dump(), "item": target})
    return {"featured": items}


@router.post("")
async def create_featured(body: FeaturedCreate, store: ListingsStore = Depends(get_store)):
    target = store.get_job(body.ref_id) if body.kind == "job" else store.get_program(body.ref_id)
    if target is None:
        raise HTTPException(status_code=404, detail=f"No {body.kind} with id {body.ref_id}")
    item = store.add_featured(Featured(**body.model_dump()))
    return {"featured": item}
