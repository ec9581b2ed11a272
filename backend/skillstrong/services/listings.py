"""Job and program listings store backed by SQLModel.

All filtering is substring/range based and case-insensitive. The store is
request-scoped: it wraps the Session handed to it and never caches rows.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import String, cast, func, or_
from sqlmodel import Session, select

from skillstrong.models.listings import Featured, Job, Program

logger = logging.getLogger(__name__)

BAY_AREA_CITIES = [
    "San Francisco", "Oakland", "Berkeley", "Richmond", "San Leandro", "Hayward",
    "Fremont", "Union City", "San Jose", "Santa Clara", "Sunnyvale", "Mountain View",
    "Palo Alto", "Redwood City", "Menlo Park", "San Mateo", "Daly City",
    "South San Francisco", "San Bruno", "Millbrae", "Burlingame", "Cupertino",
    "Milpitas", "Campbell", "Los Gatos", "Morgan Hill", "Gilroy", "Newark",
    "Pleasanton", "Dublin", "Livermore", "Walnut Creek", "Concord", "Antioch",
    "Pittsburg", "Martinez", "San Rafael", "Novato", "Petaluma", "Santa Rosa",
    "Vallejo", "Fairfield", "Vacaville", "Napa", "San Carlos", "Belmont",
    "Foster City", "San Pablo", "El Cerrito", "Alameda",
]

PREFERRED_METROS = [
    "Bay Area, CA", "Los Angeles, CA", "San Diego, CA", "Phoenix, AZ", "Tucson, AZ", "Denver, CO",
    "Dallas–Fort Worth, TX", "Houston, TX", "Austin, TX", "Seattle, WA", "Portland, OR",
    "Chicago, IL", "Detroit, MI", "Columbus, OH", "Cleveland, OH", "Boston, MA",
    "New York City, NY", "Philadelphia, PA", "Atlanta, GA", "Miami, FL",
]


@dataclass
class JobFilters:
    keywords: list[str] = field(default_factory=list)  # OR'd across title/company/description/skills
    city: str | None = None
    state: str | None = None
    location: str | None = None
    skills: list[str] = field(default_factory=list)
    pay_min: float | None = None
    pay_max: float | None = None
    apprenticeship: bool | None = None
    limit: int | None = None
    offset: int = 0


@dataclass
class ProgramFilters:
    keywords: list[str] = field(default_factory=list)  # OR'd across school/title/description
    location: str | None = None
    metro: str | None = None
    delivery: str | None = None
    max_length_weeks: int | None = None
    max_cost: float | None = None
    require_url: bool = False
    order: str = "school"  # "school" | "newest"
    limit: int | None = None
    offset: int = 0


def _ilike(column: Any, text: str):
    return func.lower(column).like(f"%{text.lower()}%")


class ListingsStore:
    def __init__(self, session: Session):
        self.session = session

    # --- Jobs ---

    def search_jobs(self, filters: JobFilters) -> list[Job]:
        query = select(Job)

        keywords = [k for k in filters.keywords if k]
        if keywords:
            clauses = []
            for k in keywords:
                clauses.extend([
                    _ilike(Job.title, k),
                    _ilike(Job.company, k),
                    _ilike(Job.description, k),
                    _ilike(cast(Job.skills, String), k),
                ])
            query = query.where(or_(*clauses))

        if filters.state and filters.state != "All States":
            query = query.where(func.lower(Job.location).like(f"%, {filters.state.lower()}"))
        if filters.city:
            query = query.where(func.lower(Job.location).like(f"{filters.city.lower()},%"))
        if filters.location:
            query = query.where(_ilike(Job.location, filters.location))
        for skill in filters.skills:
            query = query.where(_ilike(cast(Job.skills, String), skill))
        if filters.pay_min is not None:
            query = query.where(Job.pay_max >= filters.pay_min)  # type: ignore
        if filters.pay_max is not None:
            query = query.where(Job.pay_min <= filters.pay_max)  # type: ignore
        if filters.apprenticeship is not None:
            query = query.where(Job.apprenticeship == filters.apprenticeship)

        query = query.order_by(Job.featured.desc(), Job.created_at.desc(), Job.id.desc())  # type: ignore
        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit:
            query = query.limit(filters.limit)
        return list(self.session.exec(query).all())

    def get_job(self, job_id: int) -> Job | None:
        return self.session.get(Job, job_id)

    def add_job(self, job: Job) -> Job:
        self.session.add(job)
        self.session.commit()
        self.session.refresh(job)
        return job

    def upsert_job(self, job: Job) -> tuple[Job, bool]:
        """Insert, or update the row sharing the same external URL. Returns (row, created)."""
        existing = None
        if job.external_url:
            existing = self.session.exec(select(Job).where(Job.external_url == job.external_url)).first()
        if existing is None:
            return self.add_job(job), True

        for name in ("title", "company", "location", "description", "apply_url"):
            value = getattr(job, name)
            if value:
                setattr(existing, name, value)
        existing.featured = existing.featured or job.featured
        self.session.add(existing)
        self.session.commit()
        self.session.refresh(existing)
        return existing, False

    def job_trends(self, sample: int = 500) -> dict[str, list[str]]:
        jobs = self.session.exec(select(Job).limit(sample)).all()
        titles = Counter(j.title for j in jobs if j.title)
        cities = Counter(j.location for j in jobs if j.location)
        skills = Counter(s for j in jobs for s in (j.skills or []) if s)
        return {
            "job_titles": [t for t, _ in titles.most_common(8)],
            "popular_cities": [c for c, _ in cities.most_common(8)],
            "in_demand_skills": [s for s, _ in skills.most_common(12)],
        }

    # --- Programs ---

    def search_programs(self, filters: ProgramFilters) -> tuple[list[Program], int]:
        """Return (page of programs, total matching count)."""
        query = select(Program)

        keywords = [k for k in filters.keywords if k]
        if keywords:
            clauses = []
            for k in keywords:
                clauses.extend([
                    _ilike(Program.school, k),
                    _ilike(Program.title, k),
                    _ilike(Program.description, k),
                ])
            query = query.where(or_(*clauses))

        if filters.require_url:
            query = query.where(Program.url.is_not(None))  # type: ignore
        if filters.metro:
            if filters.metro.lower() == "bay area, ca":
                query = query.where(or_(*[_ilike(Program.location, city) for city in BAY_AREA_CITIES]))
            else:
                query = query.where(_ilike(Program.location, filters.metro))
        if filters.location:
            query = query.where(_ilike(Program.location, filters.location))
        if filters.delivery and filters.delivery != "all":
            query = query.where(Program.delivery == filters.delivery)
        if filters.max_length_weeks is not None:
            query = query.where(Program.length_weeks <= filters.max_length_weeks)  # type: ignore
        if filters.max_cost is not None:
            query = query.where(Program.cost <= filters.max_cost)  # type: ignore

        total = self.session.exec(select(func.count()).select_from(query.subquery())).one()

        if filters.order == "newest":
            query = query.order_by(Program.featured.desc(), Program.created_at.desc(), Program.id.desc())  # type: ignore
        else:
            query = query.order_by(Program.featured.desc(), Program.school.asc(), Program.id.asc())  # type: ignore
        if filters.offset:
            query = query.offset(filters.offset)
        if filters.limit:
            query = query.limit(filters.limit)
        return list(self.session.exec(query).all()), int(total)

    def get_program(self, program_id: int) -> Program | None:
        return self.session.get(Program, program_id)

    def add_program(self, program: Program) -> Program:
        self.session.add(program)
        self.session.commit()
        self.session.refresh(program)
        return program

    def upsert_program(self, program: Program) -> tuple[Program, bool]:
        """Insert, or update the row with the same school/title/location. Returns (row, created)."""
        existing = self.session.exec(
            select(Program).where(
                Program.school == program.school,
                Program.title == program.title,
                Program.location == program.location,
            )
        ).first()
        if existing is None:
            return self.add_program(program), True

        for name in ("description", "url", "external_url", "length_weeks", "cost", "start_date"):
            value = getattr(program, name)
            if value is not None:
                setattr(existing, name, value)
        existing.featured = existing.featured or program.featured
        self.session.add(existing)
        self.session.commit()
        self.session.refresh(existing)
        return existing, False

    def update_program(self, program: Program, patch: dict[str, Any]) -> Program:
        for name, value in patch.items():
            setattr(program, name, value)
        self.session.add(program)
        self.session.commit()
        self.session.refresh(program)
        return program

    def all_programs(self) -> list[Program]:
        return list(self.session.exec(select(Program).order_by(Program.id)).all())  # type: ignore

    def programs_needing_enrichment(self, limit: int) -> list[Program]:
        query = (
            select(Program)
            .where(or_(Program.url.is_(None), _ilike(Program.description, "College Scorecard")))  # type: ignore
            .order_by(Program.id.desc())  # type: ignore
            .limit(limit)
        )
        return list(self.session.exec(query).all())

    def program_trends(self, sample: int = 5000) -> dict[str, list[str]]:
        programs = self.session.exec(select(Program).limit(sample)).all()
        titles = Counter(p.title.strip() for p in programs if p.title and p.title.strip())
        locations = Counter(p.location for p in programs if p.location)
        durations = Counter(p.length_weeks for p in programs if p.length_weeks and p.length_weeks > 0)
        return {
            "trending_programs": [t for t, _ in titles.most_common(15)],
            "popular_locations": [loc for loc, _ in locations.most_common(15)],
            "common_durations": [f"{w} weeks" for w, _ in durations.most_common(8)],
        }

    def program_metros(self) -> list[str]:
        locations = set(self.session.exec(select(Program.location).distinct()).all())
        return [m for m in PREFERRED_METROS if m in locations]

    def clear_programs(self) -> int:
        programs = self.session.exec(select(Program)).all()
        for program in programs:
            self.session.delete(program)
        self.session.commit()
        return len(programs)

    # --- Featured ---

    def add_featured(self, item: Featured) -> Featured:
        self.session.add(item)
        self.session.commit()
        self.session.refresh(item)
        return item

    def list_featured(self, kind: str | None = None, limit: int | None = None) -> list[Featured]:
        query = select(Featured)
        if kind:
            query = query.where(Featured.kind == kind)
        query = query.order_by(Featured.created_at.desc(), Featured.id.desc())  # type: ignore
        if limit:
            query = query.limit(limit)
        return list(self.session.exec(query).all())

    def resolve_featured(self, item: Featured) -> Job | Program | None:
        if item.kind == "job":
            return self.get_job(item.ref_id)
        if item.kind == "program":
            return self.get_program(item.ref_id)
        logger.debug(f"Featured {item.id} has unknown kind {item.kind!r}")
        return None
