"""Shared FastAPI dependencies for external services and the listings store."""

import logging

from fastapi import Depends
from sqlmodel import Session

from skillstrong.core.database import get_session
from skillstrong.services.integrations.scorecard import ScorecardService
from skillstrong.services.integrations.search import SearchService
from skillstrong.services.integrations.web import PageFetcher
from skillstrong.services.listings import ListingsStore
from skillstrong.services.llm import BaseLLMProvider, LLMError, get_llm_provider

logger = logging.getLogger(__name__)


def get_llm() -> BaseLLMProvider | None:
    """The configured provider, or None when it cannot be constructed (e.g. missing key)."""
    try:
        return get_llm_provider()
    except (LLMError, ValueError) as e:
        logger.warning(f"LLM provider unavailable: {e}")
        return None


def get_search() -> SearchService:
    return SearchService()


def get_fetcher() -> PageFetcher:
    return PageFetcher()


def get_scorecard() -> ScorecardService:
    return ScorecardService()


def get_store(session: Session = Depends(get_session)) -> ListingsStore:
    return ListingsStore(session)
