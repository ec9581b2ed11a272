from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class UserProfile(SQLModel, table=True):
    id: str = Field(primary_key=True)  # Supabase auth user id
    zip_code: Optional[str] = None  # free-text location, e.g. "44114" or "Cleveland, OH"
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
