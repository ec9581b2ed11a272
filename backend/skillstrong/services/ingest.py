"""Admin ingestion and maintenance for the listings tables.

These run as one-shot admin requests, never on the chat path. External calls are
made one at a time with a fixed pause between them to stay under provider rate limits.
"""

import asyncio
import logging
import re

from skillstrong.core.config import settings
from skillstrong.models.listings import Job, Program
from skillstrong.services.integrations.scorecard import CIP4_NAMES, ScorecardService, friendly_program_title
from skillstrong.services.integrations.search import SearchResult, SearchService
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.listings import ListingsStore

logger = logging.getLogger(__name__)

DEFAULT_JOB_QUERIES = [
    "site:indeed.com/viewjob (manufacturing OR machinist OR welder OR robotics)",
    "site:manufacturingjobs.com (manufacturing OR machinist OR welder OR robotics)",
]

FAMILY_HINTS: dict[str, list[str]] = {
    "Precision Metal Working": ["welding", "CNC", "machining", "tool & die", "manufacturing"],
    "Electromechanical & Mechatronics": ["mechatronics", "robotics", "electromechanical"],
    "Industrial & Manufacturing Production": ["manufacturing technology", "industrial maintenance", "production tech"],
}

_CITY_STATE_RE = re.compile(r"[A-Z][a-zA-Z]+,\s*[A-Z]{2}")
_BOARD_SUFFIX_RE = re.compile(r"\s*-\s*Indeed.*$", re.IGNORECASE)
_WEEKS_RE = re.compile(r"(\d{1,3})\s?(?:weeks|week|wks|wk)\b", re.IGNORECASE)
_MONTHS_RE = re.compile(r"(\d{1,2})\s?(?:months|month|mos|mo)\b", re.IGNORECASE)
_COST_RE = re.compile(r"\$ ?([0-9][0-9,]{2,6})(?:\.\d{2})?")


# --- Jobs from Custom Search ---

def job_from_search_result(item: SearchResult, featured: bool = False) -> Job:
    company = re.sub(r"^www\.", "", item.display_link) if item.display_link else "Job board"
    location = _CITY_STATE_RE.search(item.snippet or "")
    title = _BOARD_SUFFIX_RE.sub("", item.title or "").strip()
    return Job(
        title=title or item.title or "Manufacturing Role",
        company=company,
        location=location.group(0) if location else "United States",
        description=item.snippet or None,
        skills=[],
        apprenticeship=False,
        external_url=item.url,
        apply_url=item.url,
        featured=featured,
    )


async def ingest_jobs_from_search(
    store: ListingsStore,
    search: SearchService,
    queries: list[str] | None = None,
    max_per_query: int = 6,
    featured: bool = False,
) -> list[Job]:
    created = []
    for query in queries or DEFAULT_JOB_QUERIES:
        items = await search.search(query, min(max_per_query, 10))
        for item in items:
            job, _ = store.upsert_job(job_from_search_result(item, featured))
            created.append(job)
        await asyncio.sleep(settings.ingest_delay_seconds)
    logger.info(f"Search ingest stored {len(created)} job(s)")
    return created


# --- Programs from College Scorecard ---

async def ingest_programs_from_scorecard(
    store: ListingsStore,
    scorecard: ScorecardService,
    cip4: str,
    states: list[str] | None = None,
    pages: int = 2,
    per_page: int = 100,
    featured: bool = False,
) -> list[Program]:
    created = []
    for state in states or [None]:
        schools = await scorecard.fetch_schools_by_cip4(cip4, state=state, per_page=per_page, pages=pages)
        for school in schools:
            name = school.get("school.name")
            if not name:
                continue
            program = Program(
                school=name,
                title=friendly_program_title(cip4, school.get("latest.programs.cip_4_digit.title")),
                location=f"{school.get('school.city') or ''}, {school.get('school.state') or ''}".strip(", "),
                delivery="in-person",
                description=f"Program listed via College Scorecard (CIP {cip4}).",
                external_url=school.get("school.school_url") or None,
                featured=featured,
            )
            row, _ = store.upsert_program(program)
            created.append(row)
        await asyncio.sleep(settings.ingest_delay_seconds)
    logger.info(f"Scorecard ingest stored {len(created)} program(s) for CIP {cip4}")
    return created


# --- Maintenance ---

def backfill_program_titles(store: ListingsStore) -> int:
    """Rewrite placeholder titles like 'CIP 4805' to the family's friendly name."""
    updated = 0
    for program in store.all_programs():
        match = re.fullmatch(r"\s*CIP\s*(\d{4})\s*", program.title or "")
        if not match:
            continue
        store.update_program(program, {"title": friendly_program_title(match.group(1))})
        updated += 1
    return updated


def family_from_title(title: str) -> str:
    if re.search(r"precision metal", title, re.IGNORECASE):
        return "Precision Metal Working"
    if re.search(r"mechatronics|electromechanical|robotic", title, re.IGNORECASE):
        return "Electromechanical & Mechatronics"
    if re.search(r"industrial|manufacturing production", title, re.IGNORECASE):
        return "Industrial & Manufacturing Production"
    lowered = title.lower()
    for name in CIP4_NAMES.values():
        if name.split("(")[0].strip().lower() in lowered:
            if "Mechatronics" in name:
                return "Electromechanical & Mechatronics"
            if "Precision Metal" in name:
                return "Precision Metal Working"
    return "Industrial & Manufacturing Production"


def score_candidate(item: SearchResult, school: str = "") -> int:
    url = item.url.lower()
    host = item.display_link.lower()
    compact = re.sub(r"[^a-z]", "", school.lower())
    points = 0
    if host.endswith(".edu"):
        points += 3
    if "program" in url or "/academic" in url or "/career" in url:
        points += 2
    if "certificate" in url or "cert" in url or "aas" in url:
        points += 1
    if compact and (compact in url or compact in host):
        points += 2
    if url.endswith(".pdf"):
        points -= 2
    return points


def parse_length_and_cost(html: str) -> dict[str, int]:
    found: dict[str, int] = {}
    weeks = _WEEKS_RE.search(html)
    months = _MONTHS_RE.search(html)
    if weeks:
        found["length_weeks"] = int(weeks.group(1))
    elif months:
        found["length_weeks"] = int(months.group(1)) * 4
    cost = _COST_RE.search(html)
    if cost:
        found["cost"] = int(cost.group(1).replace(",", ""))
    return found


async def enrich_programs(
    store: ListingsStore, search: SearchService, fetcher: PageFetcher, limit: int = 60
) -> int:
    """Find a program page for rows missing a URL (or still on boilerplate) and patch details."""
    updated = 0
    for program in store.programs_needing_enrichment(min(limit, 100)):
        family = family_from_title(program.title or "")
        hints = FAMILY_HINTS.get(family, ["manufacturing"])
        city = (program.location or "").split(",")[0]
        base = f"{program.school} {hints[0]} program"
        queries = [
            f"{base} {city}".strip(),
            f"{program.school} {' '.join(hints)} program",
            f"site:.edu {program.school} {hints[0]} program",
            f"{program.school} {family} program",
        ]
        items = await search.search_many(queries, per_query=4)
        if not items:
            continue

        best = max(items, key=lambda it: score_candidate(it, program.school))
        patch: dict = {
            "url": best.url,
            "description": (best.snippet or "").strip()[:240] or f"Learn {hints[0]} at {program.school}.",
        }
        html = await fetcher.fetch_html(best.url)
        if html:
            patch.update(parse_length_and_cost(html))

        store.update_program(program, patch)
        updated += 1
        await asyncio.sleep(settings.ingest_delay_seconds)
    logger.info(f"Enriched {updated} program(s)")
    return updated
