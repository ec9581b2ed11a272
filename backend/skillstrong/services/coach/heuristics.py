"""Keyword predicates used to route a chat turn.

Every routing decision the coach makes without a model call lives here as a pure
function of the message text, so the fuzzy cases can be enumerated in tests.
"""

import re

MANUFACTURING_RE = re.compile(
    r"\b("
    r"manufactur\w*|cnc|machinist\w*|machining|lathe|mill(ing)? operator|tool\s*(and|&)\s*die|"
    r"weld\w*|fabricat\w*|brazing|soldering|sheet metal|"
    r"robot\w*|mechatronic\w*|automation|plc\w*|electromechanical|"
    r"additive|3d print\w*|"
    r"industrial maintenance|maintenance tech\w*|millwright\w*|"
    r"quality (control|assurance|inspector|tech\w*)|metrology|cmm|"
    r"assembl(y|er) (line|tech\w*|worker)|production (tech\w*|worker|line)|"
    r"logistics|supply chain|forklift|warehouse (associate|operations|worker)|"
    r"apprentice\w*|trade school|vocational|skilled trades?|"
    r"nims|aws (certified )?weld\w*|aws d1\.\d|cwi|mssc|certified production tech\w*|asq|osha|six sigma|lean manufacturing"
    r")\b",
    re.IGNORECASE,
)

JOB_TRIGGER_RE = re.compile(
    r"\b(jobs?|openings?|hiring|positions?|employers?|vacanc(y|ies)|apprentice\w*|work near)\b",
    re.IGNORECASE,
)
PROGRAM_TRIGGER_RE = re.compile(
    r"\b(programs?|training|certificat\w*|certs?|courses?|classes|schools?|colleges?|bootcamps?)\b",
    re.IGNORECASE,
)
APPRENTICESHIP_RE = re.compile(r"\bapprentice\w*\b", re.IGNORECASE)

OVERVIEW_REQUEST_RE = re.compile(r"^\s*tell me about\s+(?P<topic>.+?)\s*[.?!]*\s*$", re.IGNORECASE)
OVERVIEW_PHRASING_RE = re.compile(
    r"\b(tell me about|what is|what's|what are|what does|overview|explain|describe|"
    r"day in the life|introduction to|how do i become)\b",
    re.IGNORECASE,
)
TIME_SENSITIVE_RE = re.compile(
    r"\b(salary|salaries|wages?|pay|paid|earn\w*|openings?|hiring|tuition|costs?|"
    r"near me|nearby|jobs? (in|near|around)|current(ly)?|latest|this year|today|right now|"
    r"(19|20)\d\d)\b",
    re.IGNORECASE,
)
NEEDS_LOCATION_RE = re.compile(r"\b(near me|nearby|close to me|in my area|around me|local)\b", re.IGNORECASE)

LOCATION_RE = re.compile(
    r"\b(?:in|near|around)\s+(?P<loc>[A-Z][a-zA-Z.'-]+(?:\s+[A-Z][a-zA-Z.'-]+)*,\s*[A-Z]{2})\b"
)
ZIP_RE = re.compile(r"\b\d{5}\b")

TOKEN_RE = re.compile(r"[a-z0-9+#&]+")
STOPWORDS = frozenset({
    "a", "an", "and", "any", "are", "about", "around", "at", "be", "can", "do", "does", "find",
    "for", "from", "get", "give", "have", "how", "i", "in", "is", "it", "list", "looking",
    "me", "my", "near", "nearby", "of", "on", "or", "please", "show", "some", "tell", "that",
    "the", "there", "to", "want", "what", "where", "which", "who", "with", "you",
    "job", "jobs", "opening", "openings", "hiring", "position", "positions", "employer",
    "employers", "work", "career", "careers", "program", "programs", "training", "certificate",
    "certificates", "certification", "certifications", "cert", "certs", "course", "courses",
    "class", "classes", "school", "schools", "college", "colleges", "apprentice",
    "apprentices", "apprenticeship", "apprenticeships", "local", "area",
})


def is_manufacturing_query(text: str) -> bool:
    return bool(MANUFACTURING_RE.search(text or ""))


def wants_jobs(text: str) -> bool:
    return bool(JOB_TRIGGER_RE.search(text or ""))


def wants_programs(text: str) -> bool:
    return bool(PROGRAM_TRIGGER_RE.search(text or ""))


def wants_apprenticeship(text: str) -> bool:
    return bool(APPRENTICESHIP_RE.search(text or ""))


def overview_topic(text: str) -> str | None:
    """Return the career named in a 'Tell me about X' request, if that is all the message says."""
    match = OVERVIEW_REQUEST_RE.match(text or "")
    return match.group("topic") if match else None


def is_overview_request(text: str) -> bool:
    return overview_topic(text) is not None


def has_time_sensitive_terms(text: str) -> bool:
    return bool(TIME_SENSITIVE_RE.search(text or ""))


def is_pure_overview(text: str) -> bool:
    """Overview phrasing with nothing that calls for current external facts."""
    return bool(OVERVIEW_PHRASING_RE.search(text or "")) and not has_time_sensitive_terms(text)


def needs_location(text: str, location: str | None) -> bool:
    """True when the user asks for local results but no location is known."""
    return not location and bool(NEEDS_LOCATION_RE.search(text or ""))


def extract_location(text: str) -> str | None:
    """Pull a 'City, ST' phrase or a ZIP code out of the message."""
    match = LOCATION_RE.search(text or "")
    if match:
        return match.group("loc")
    zip_match = ZIP_RE.search(text or "")
    return zip_match.group(0) if zip_match else None


def extract_keywords(text: str, location: str | None = None, limit: int = 6) -> list[str]:
    """Search terms for the listings lookup: the message minus routing words and the location."""
    lowered = (text or "").lower()
    if location:
        lowered = lowered.replace(location.lower(), " ")
    keywords: list[str] = []
    for token in TOKEN_RE.findall(lowered):
        if token in STOPWORDS or token in keywords:
            continue
        if len(token) < 3 and not any(ch.isdigit() for ch in token):
            continue
        keywords.append(token)
    return keywords[:limit]
