"""Internal listings lookup for a chat turn, rendered as markdown context."""

import logging

from sqlalchemy.exc import SQLAlchemyError

from skillstrong.models.listings import Job, Program
from skillstrong.services.coach.heuristics import (
    extract_keywords,
    wants_apprenticeship,
    wants_jobs,
    wants_programs,
)
from skillstrong.services.listings import JobFilters, ListingsStore, ProgramFilters

logger = logging.getLogger(__name__)

INTERNAL_HEADING = "**Matching SkillStrong listings:**"
MAX_ROWS_PER_TABLE = 3


def _format_pay(job: Job) -> str:
    if job.pay_min and job.pay_max:
        return f" · ${job.pay_min:,.0f}–${job.pay_max:,.0f}"
    if job.pay_min:
        return f" · from ${job.pay_min:,.0f}"
    return ""


def render_job(job: Job) -> str:
    line = f"- **{job.title}** — {job.company} ({job.location}){_format_pay(job)}"
    if job.apprenticeship:
        line += " · Apprenticeship"
    url = job.apply_url or job.external_url
    if url:
        line += f" · [Apply]({url})"
    return line


def render_program(program: Program) -> str:
    line = f"- **{program.title}** — {program.school} ({program.location}, {program.delivery})"
    if program.length_weeks:
        line += f" · {program.length_weeks} weeks"
    if program.cost:
        line += f" · ${program.cost:,.0f}"
    url = program.url or program.external_url
    if url:
        line += f" · [Details]({url})"
    return line


def render_listings(jobs: list[Job], programs: list[Program]) -> str:
    if not jobs and not programs:
        return ""
    lines = [INTERNAL_HEADING]
    if jobs:
        lines.append("")
        lines.append("Jobs:")
        lines.extend(render_job(j) for j in jobs)
    if programs:
        lines.append("")
        lines.append("Training programs:")
        lines.extend(render_program(p) for p in programs)
    return "\n".join(lines)


def query_internal_listings(store: ListingsStore, text: str, location: str | None = None) -> str:
    """Look up matching jobs/programs for the message. Empty string when nothing matches.

    Database errors are treated as "no results".
    """
    check_jobs = wants_jobs(text)
    check_programs = wants_programs(text)
    if not (check_jobs or check_programs):
        return ""

    apprenticeship = wants_apprenticeship(text)
    keywords = extract_keywords(text, location)
    if not keywords and not location and not apprenticeship:
        return ""

    jobs: list[Job] = []
    programs: list[Program] = []
    try:
        if check_jobs:
            jobs = store.search_jobs(JobFilters(
                keywords=keywords,
                location=location,
                apprenticeship=True if apprenticeship else None,
                limit=MAX_ROWS_PER_TABLE,
            ))
        if check_programs:
            programs, _ = store.search_programs(ProgramFilters(
                keywords=keywords,
                location=location,
                order="newest",
                limit=MAX_ROWS_PER_TABLE,
            ))
    except SQLAlchemyError as e:
        logger.warning(f"Internal listings lookup failed, continuing without it: {e}")
        return ""

    logger.info(f"Internal listings for {keywords} @ {location or 'anywhere'}: {len(jobs)} jobs, {len(programs)} programs")
    return render_listings(jobs, programs)
