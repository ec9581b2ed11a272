"""Featured-listing matching for chat answers."""

import logging
from dataclasses import dataclass

from skillstrong.models.listings import Job
from skillstrong.services.listings import ListingsStore

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 6
MAX_SHOWN = 3


@dataclass
class FeaturedMatch:
    kind: str  # "job" | "program"
    title: str
    org: str
    location: str


def find_featured_matching(
    store: ListingsStore, query: str | None, location: str | None
) -> list[FeaturedMatch]:
    """Match curated rows by category/metro hint and resolve the first few.

    A missing hint matches anything. Rows whose ref_id no longer resolves are skipped.
    """
    q = (query or "").lower()
    loc = (location or "").lower()

    candidates = []
    for item in store.list_featured():
        category_ok = not item.category_hint or item.category_hint.lower() in q
        metro_ok = not item.metro_hint or item.metro_hint.lower() in loc
        if category_ok and metro_ok:
            candidates.append(item)
            if len(candidates) >= MAX_CANDIDATES:
                break

    matches = []
    for item in candidates[:MAX_SHOWN]:
        row = store.resolve_featured(item)
        if row is None:
            logger.debug(f"Featured {item.id} points at missing {item.kind} {item.ref_id}")
            continue
        if isinstance(row, Job):
            matches.append(FeaturedMatch(kind="job", title=row.title, org=row.company, location=row.location))
        else:
            matches.append(FeaturedMatch(kind="program", title=row.title, org=row.school, location=row.location))
    return matches


def render_featured(matches: list[FeaturedMatch], location: str | None = None) -> str:
    if not matches:
        return ""
    near = f" near {location}" if location else ""
    lines = [f"**Featured{near}:**"]
    lines.extend(f"- **{m.title}** — {m.org} ({m.location})" for m in matches)
    return "\n".join(lines)
