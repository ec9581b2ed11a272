"""Per-user profile settings."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from skillstrong.core.auth import get_current_user_id
from skillstrong.core.database import get_session
from skillstrong.models.profile import UserProfile

router = APIRouter()


class LocationUpdate(BaseModel):
    location: str = ""


@router.post("/location")
async def update_location(
    body: LocationUpdate,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_session),
):
    location = body.location.strip()
    if not location:
        raise HTTPException(status_code=400, detail="Location is required")

    profile = session.get(UserProfile, user_id) or UserProfile(id=user_id)
    profile.zip_code = location
    profile.updated_at = datetime.now(timezone.utc)
    session.add(profile)
    session.commit()
    return {"success": True, "location": location}
