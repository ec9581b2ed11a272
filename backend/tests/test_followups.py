"""Tests for follow-up chips and conversation titles."""

import asyncio

from skillstrong.services.coach.followups import (
    DEFAULT_FOLLOWUPS,
    MAX_FOLLOWUPS,
    clean_followups,
    generate_followups,
)
from skillstrong.services.coach.titles import generate_title


def test_clean_followups_dedupes_and_caps():
    items = ["Find CNC programs", "find cnc programs", "", "  "] + [f"Question {i}" for i in range(10)]
    cleaned = clean_followups(items)
    assert cleaned[0] == "Find CNC programs"
    assert len(cleaned) == MAX_FOLLOWUPS
    assert "find cnc programs" not in cleaned


def test_clean_followups_drops_long_questions():
    long_one = " ".join(["word"] * 12)
    assert clean_followups([long_one, "Short one"]) == ["Short one"]


def test_generate_followups_uses_json_mode(fake_llm):
    followups = asyncio.run(generate_followups(fake_llm, "welding?", "Welding is...", "Cleveland, OH"))
    assert followups == ["What certifications help most?", "Find CNC training programs"]
    _, messages, options = fake_llm.calls[0]
    assert options["json_mode"] is True
    assert "User location: Cleveland, OH" in messages[1].content


def test_generate_followups_accepts_fenced_json(fake_llm):
    fake_llm.followups = '```json\n{"followups": ["Where can I train?"]}\n```'
    assert asyncio.run(generate_followups(fake_llm, "q", "a")) == ["Where can I train?"]


def test_malformed_followups_fall_back(fake_llm):
    fake_llm.followups = "Sure! Here are some ideas: 1. pay 2. training"
    assert asyncio.run(generate_followups(fake_llm, "q", "a")) == DEFAULT_FOLLOWUPS


def test_wrong_shape_falls_back(fake_llm):
    fake_llm.followups = '{"questions": ["a"]}'
    assert asyncio.run(generate_followups(fake_llm, "q", "a")) == DEFAULT_FOLLOWUPS


def test_empty_list_falls_back(fake_llm):
    fake_llm.followups = '{"followups": ["", "   "]}'
    assert asyncio.run(generate_followups(fake_llm, "q", "a")) == DEFAULT_FOLLOWUPS


def test_provider_error_falls_back(fake_llm):
    fake_llm.fail_stages = {"followups"}
    assert asyncio.run(generate_followups(fake_llm, "q", "a")) == DEFAULT_FOLLOWUPS


def test_title_is_trimmed(fake_llm):
    fake_llm.title = "  'Welding Career Paths'  "
    assert asyncio.run(generate_title(fake_llm, "Tell me about welding", "Welding is...")) == "Welding Career Paths"
    assert fake_llm.calls[0][2]["temperature"] == 0.2


def test_empty_title_falls_back(fake_llm):
    fake_llm.title = ""
    assert asyncio.run(generate_title(fake_llm, "hi", "hello")) == "New Chat"
