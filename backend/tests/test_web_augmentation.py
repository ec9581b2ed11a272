"""Tests for the web augmentation decision and cited synthesis."""

import asyncio

import httpx

from tests.conftest import FakeFetcher, FakeSearch, make_page
from skillstrong.services.coach.web import (
    MAX_PAGE_CHARS,
    augment_with_web,
    build_source_context,
    fetch_pages,
    render_sources,
    should_augment,
)
from skillstrong.services.integrations.search import SearchError, SearchResult

URLS = ["https://a.edu/1", "https://b.gov/2", "https://c.org/3", "https://d.org/4"]


def _search():
    return FakeSearch(results=[SearchResult(title=u, url=u) for u in URLS])


def test_internal_context_never_augments(fake_llm):
    assert not asyncio.run(should_augment(fake_llm, "welding salary near Cleveland", "draft", "**Matching**"))
    assert fake_llm.calls == []


def test_pure_overview_skips_without_a_call(fake_llm):
    assert not asyncio.run(should_augment(fake_llm, "What is a millwright?", "draft", ""))
    assert fake_llm.calls == []


def test_time_sensitive_query_augments_without_a_call(fake_llm):
    assert asyncio.run(should_augment(fake_llm, "CNC wages in Ohio", "draft", ""))
    assert fake_llm.calls == []


def test_ambiguous_query_asks_the_model(fake_llm):
    fake_llm.decision = "YES"
    assert asyncio.run(should_augment(fake_llm, "Is welding a good fit for me?", "draft", ""))
    assert fake_llm.calls[0][2]["temperature"] == 0


def test_decision_error_skips_augmentation(fake_llm):
    fake_llm.fail_stages = {"decision"}
    assert not asyncio.run(should_augment(fake_llm, "Is welding a good fit for me?", "draft", ""))


def test_fetch_pages_keeps_order_and_drops_failures():
    fetcher = FakeFetcher(pages={
        URLS[0]: make_page(URLS[0]),
        URLS[1]: httpx.ConnectError("boom"),
        URLS[3]: make_page(URLS[3]),
    })
    pages = asyncio.run(fetch_pages(fetcher, URLS))
    assert [p.url for p in pages] == [URLS[0], URLS[3]]


def test_render_sources_numbers_pages():
    pages = [make_page(URLS[0], "First"), make_page(URLS[2], "Third")]
    assert render_sources(pages) == f"**Sources**\n1. [First]({URLS[0]})\n2. [Third]({URLS[2]})"


def test_source_context_truncates_page_text():
    page = make_page(URLS[0], "Long", text="x" * (MAX_PAGE_CHARS + 500))
    context = build_source_context([page])
    assert context.startswith(f"[#1] Long\nURL: {URLS[0]}\n")
    assert context.count("x") == MAX_PAGE_CHARS


def test_augment_reads_only_top_three_results(fake_llm):
    fetcher = FakeFetcher(pages={u: make_page(u) for u in URLS})
    result = asyncio.run(augment_with_web(fake_llm, _search(), fetcher, "CNC wages", "Ohio"))
    assert fetcher.requested == URLS[:3]
    assert [p.url for p in result.sources] == URLS[:3]
    assert result.answer.startswith(fake_llm.synthesis)
    assert URLS[3] not in result.answer


def test_augment_sources_come_from_fetched_pages_only(fake_llm):
    fake_llm.synthesis = "Pay data [#1]. See also https://made-up.example.com"
    fetcher = FakeFetcher(pages={URLS[1]: make_page(URLS[1], "BLS")})
    result = asyncio.run(augment_with_web(fake_llm, _search(), fetcher, "CNC wages"))
    assert result.answer.endswith(f"**Sources**\n1. [BLS]({URLS[1]})")


def test_augment_with_zero_pages_returns_none(fake_llm):
    result = asyncio.run(augment_with_web(fake_llm, _search(), FakeFetcher(), "CNC wages"))
    assert result is None
    assert "synthesis" not in fake_llm.stages()


def test_augment_search_error_returns_none(fake_llm):
    search = FakeSearch(error=SearchError("quota exceeded"))
    assert asyncio.run(augment_with_web(fake_llm, search, FakeFetcher(), "CNC wages")) is None


def test_augment_empty_synthesis_returns_none(fake_llm):
    fake_llm.synthesis = "   "
    fetcher = FakeFetcher(pages={URLS[0]: make_page(URLS[0])})
    assert asyncio.run(augment_with_web(fake_llm, _search(), fetcher, "CNC wages")) is None
