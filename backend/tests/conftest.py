"""Shared test fixtures for backend tests."""

from unittest.mock import patch

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from skillstrong.api.deps import get_fetcher, get_llm, get_search
from skillstrong.core.config import settings
from skillstrong.core.database import get_session
from skillstrong.services.coach.answer import COACH_SYSTEM
from skillstrong.services.coach.domain import CLASSIFIER_PROMPT
from skillstrong.services.coach.followups import FOLLOWUP_PROMPT
from skillstrong.services.coach.research import RESEARCH_PROMPT
from skillstrong.services.coach.web import DECISION_PROMPT, SYNTHESIS_PROMPT
from skillstrong.services.integrations.search import SearchService
from skillstrong.services.integrations.web import PageFetcher, ReadablePage
from skillstrong.services.listings import ListingsStore
from skillstrong.services.llm import BaseLLMProvider, LLMError, LLMResponse

TEST_JWT_SECRET = "test-secret-for-skillstrong-jwt-signing-0001"

# In-memory SQLite with StaticPool so all connections (including threads) share one DB
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


def get_test_session():
    with Session(test_engine) as session:
        yield session


def auth_header(user_id: str = "user-1") -> dict[str, str]:
    token = jwt.encode({"sub": user_id, "aud": "authenticated"}, TEST_JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def make_page(url: str, title: str = "", text: str = "Readable text.", image: str = "") -> ReadablePage:
    return ReadablePage(title=title or url, url=url, text=text, image=image)


class FakeLLM(BaseLLMProvider):
    """Rule-based stand-in: the reply depends on which prompt the call was made with."""

    name = "fake"

    _STAGES = {
        CLASSIFIER_PROMPT: "domain",
        DECISION_PROMPT: "decision",
        SYNTHESIS_PROMPT: "synthesis",
        FOLLOWUP_PROMPT: "followups",
        RESEARCH_PROMPT: "research",
        COACH_SYSTEM: "answer",
    }

    def __init__(self):
        self.calls: list[tuple[str, list, dict]] = []
        self.fail_stages: set[str] = set()
        self.domain = "IN"
        self.decision = "NO"
        self.answer = "Here is some practical advice from Coach Mach."
        self.synthesis = "Machinists in Ohio earn a median wage reported by BLS [#1]."
        self.followups = '{"followups": ["What certifications help most?", "Find CNC training programs"]}'
        self.research = '{"answer_markdown": "## Summary", "citations": [], "followups": [], "images": []}'
        self.title = "CNC Career Questions"

    def stage_of(self, messages) -> str:
        first = messages[0] if messages else None
        if first is not None and first.role == "system":
            return self._STAGES.get(first.content, "unknown")
        return "title"

    def stages(self) -> list[str]:
        return [stage for stage, _, _ in self.calls]

    def messages_for(self, stage: str) -> list:
        return next(messages for s, messages, _ in self.calls if s == stage)

    async def chat(self, messages, temperature=0.3, json_mode=False, max_tokens=None):
        stage = self.stage_of(messages)
        self.calls.append((stage, messages, {"temperature": temperature, "json_mode": json_mode, "max_tokens": max_tokens}))
        if stage in self.fail_stages:
            raise LLMError(f"{stage} call failed")
        return LLMResponse(content=getattr(self, stage, ""))


class FakeSearch(SearchService):
    def __init__(self, results=None, error: Exception | None = None):
        super().__init__()
        self.results = results or []
        self.error = error
        self.queries: list[str] = []

    @property
    def is_configured(self) -> bool:
        return True

    async def search(self, query, num=6):
        self.queries.append(query)
        if self.error:
            raise self.error
        return list(self.results[:num])


class FakeFetcher(PageFetcher):
    """Serves pages from a dict. A missing url yields None; an Exception value is raised."""

    def __init__(self, pages=None, html=None):
        super().__init__()
        self.pages = pages or {}
        self.html = html or {}
        self.requested: list[str] = []

    async def fetch_readable(self, url):
        self.requested.append(url)
        page = self.pages.get(url)
        if isinstance(page, Exception):
            raise page
        return page

    async def fetch_html(self, url):
        self.requested.append(url)
        return self.html.get(url)


@pytest.fixture(autouse=True)
def setup_test_db():
    """Create all tables before each test, drop after."""
    import skillstrong.models  # noqa: F401 - register models
    SQLModel.metadata.create_all(test_engine)
    yield
    SQLModel.metadata.drop_all(test_engine)


@pytest.fixture(autouse=True)
def test_settings():
    with (
        patch.object(settings, "supabase_jwt_secret", TEST_JWT_SECRET),
        patch.object(settings, "admin_secret", ""),
        patch.object(settings, "ingest_delay_seconds", 0),
    ):
        yield settings


@pytest.fixture
def session():
    with Session(test_engine) as s:
        yield s


@pytest.fixture
def store(session):
    return ListingsStore(session)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def fake_search():
    return FakeSearch()


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def client(fake_llm, fake_search, fake_fetcher):
    """FastAPI TestClient with the database and all external services replaced."""
    with patch("skillstrong.core.database.engine", test_engine):
        from skillstrong.main import app

        app.dependency_overrides[get_session] = get_test_session
        app.dependency_overrides[get_llm] = lambda: fake_llm
        app.dependency_overrides[get_search] = lambda: fake_search
        app.dependency_overrides[get_fetcher] = lambda: fake_fetcher

        with TestClient(app) as c:
            yield c

        app.dependency_overrides.clear()
