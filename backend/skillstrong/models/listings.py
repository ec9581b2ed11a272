"""Job, training program and featured-placement models."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class Job(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    company: str
    location: str = Field(index=True)
    description: Optional[str] = None
    skills: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    pay_min: Optional[float] = None
    pay_max: Optional[float] = None
    apprenticeship: bool = Field(default=False)
    external_url: Optional[str] = Field(default=None, index=True)
    apply_url: Optional[str] = None
    featured: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Program(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    school: str
    title: str
    location: str = Field(index=True)
    delivery: str = Field(default="in-person")  # in-person | online | hybrid
    length_weeks: Optional[int] = None
    cost: Optional[float] = None
    certs: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    start_date: Optional[str] = None
    url: Optional[str] = None
    external_url: Optional[str] = None
    description: Optional[str] = None
    featured: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Featured(SQLModel, table=True):
    """Curated pointer to a Job or Program. ref_id is not a foreign key."""

    id: Optional[int] = Field(default=None, primary_key=True)
    kind: str  # "job" | "program"
    ref_id: int
    category_hint: Optional[str] = None  # e.g. "CNC Machinist"
    metro_hint: Optional[str] = None  # e.g. "Cleveland"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
