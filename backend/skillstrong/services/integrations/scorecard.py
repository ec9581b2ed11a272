"""College Scorecard (api.data.gov) client for manufacturing program families."""

import logging
import re
from typing import Any

import httpx

from skillstrong.core.config import settings

logger = logging.getLogger(__name__)

BASE_URL = "https://api.data.gov/ed/collegescorecard/v1/schools"

# Manufacturing-relevant CIP families we ingest
CIP4_NAMES: dict[str, str] = {
    "4805": "Precision Metal Working (Welding & Machining)",
    "1504": "Electromechanical & Mechatronics Technology (Robotics)",
    "1506": "Industrial / Manufacturing Production Technologies",
}

FIELDS = [
    "id",
    "school.name",
    "school.city",
    "school.state",
    "school.school_url",
    "latest.programs.cip_4_digit.title",
    "latest.programs.cip_4_digit.code",
]


class ScorecardError(Exception):
    pass


def normalize_cip4(cip4: str) -> str:
    return re.sub(r"\D", "", cip4 or "")


def friendly_program_title(cip4: str, api_title: str | None = None) -> str:
    if api_title and api_title.strip():
        return api_title.strip()
    family = CIP4_NAMES.get(normalize_cip4(cip4))
    if family:
        return f"{family} — Certificate / AAS"
    return "Manufacturing Technology — Certificate / AAS"


class ScorecardService:
    def __init__(self, transport: httpx.AsyncBaseTransport | None = None):
        self._key = settings.college_scorecard_api_key
        self._transport = transport

    async def fetch_schools_by_cip4(
        self, cip4: str, state: str | None = None, per_page: int = 100, pages: int = 2
    ) -> list[dict[str, Any]]:
        if not self._key:
            raise ScorecardError("College Scorecard key not configured. Set SKILLSTRONG_COLLEGE_SCORECARD_API_KEY.")

        code = normalize_cip4(cip4)
        per_page = min(per_page or 100, 100)
        results: list[dict[str, Any]] = []

        async with httpx.AsyncClient(transport=self._transport, timeout=20.0) as client:
            for page in range(pages):
                params: dict[str, Any] = {
                    "api_key": self._key,
                    "per_page": per_page,
                    "fields": ",".join(FIELDS),
                    "latest.programs.cip_4_digit.code": code,
                    "page": page,
                }
                if state:
                    params["school.state"] = state
                try:
                    resp = await client.get(BASE_URL, params=params)
                    resp.raise_for_status()
                    batch = resp.json().get("results") or []
                except (httpx.HTTPError, ValueError) as e:
                    raise ScorecardError(f"Scorecard request failed: {e}") from e

                if not batch:
                    break
                results.extend(batch)
                if len(batch) < per_page:
                    break

        logger.info(f"Scorecard returned {len(results)} schools for CIP {code} ({state or 'all states'})")
        return results
