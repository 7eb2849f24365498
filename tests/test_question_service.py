from __future__ import annotations

import asyncio

import pytest

from auditions.exceptions import SuggestionUnavailable
from auditions.prompts.interview_questions import get_interview_questions_prompt
from auditions.services.question_service import MAX_QUESTIONS, QuestionService

from conftest import FakeGemini


def test_questions_are_returned_in_order():
    questions = [f"Question {i}?" for i in range(1, 6)]
    gemini = FakeGemini(result={"questions": questions})

    assert asyncio.run(QuestionService(gemini=gemini).get_questions("Anchor")) == questions


def test_prompt_uses_upper_cased_position_and_themes():
    prompt = get_interview_questions_prompt("Video Editor")

    assert "**Candidate's Preferred Position:** VIDEO EDITOR" in prompt
    assert "Content pacing" in prompt
    assert "Crowd overflow" in prompt


def test_questions_are_capped():
    gemini = FakeGemini(result={"questions": [f"Q{i}" for i in range(10)]})

    questions = asyncio.run(QuestionService(gemini=gemini).get_questions("Anchor"))

    assert len(questions) == MAX_QUESTIONS == 7
    assert questions[0] == "Q0"


def test_gemini_error_raises_suggestion_unavailable():
    gemini = FakeGemini(error=TimeoutError("deadline exceeded"))

    with pytest.raises(SuggestionUnavailable):
        asyncio.run(QuestionService(gemini=gemini).get_questions("Anchor"))


def test_empty_questions_raise_suggestion_unavailable():
    gemini = FakeGemini(result={"questions": ["", "  "]})

    with pytest.raises(SuggestionUnavailable):
        asyncio.run(QuestionService(gemini=gemini).get_questions("Anchor"))
