from __future__ import annotations

import asyncio

import pytest

from auditions.exceptions import NoCriteriaAvailable
from auditions.models.suggestion import CriteriaSuggestion
from auditions.services.criteria_service import CRITERIA_SCHEMAS, CriteriaService, find_schema
from auditions.utils.validator import validate_and_repair_json

from conftest import FakeGemini


def test_every_fixed_schema_sums_to_100():
    for role, schema in CRITERIA_SCHEMAS.items():
        assert sum(c.max_score for c in schema) == 100, role


@pytest.mark.parametrize("label", ["Anchor", "ANCHOR", "  anchor ", "Logistics  &  Operations", "video editor"])
def test_known_roles_match_case_insensitively(label):
    assert find_schema(label) is not None


def test_known_role_never_calls_gemini():
    gemini = FakeGemini(error=RuntimeError("should not be called"))
    service = CriteriaService(gemini=gemini)

    criteria = asyncio.run(service.get_criteria("Creative Designer"))

    assert [c.criterion for c in criteria] == [
        "Creativity & Originality",
        "Design Sense",
        "Tool Awareness",
        "Concept Explanation",
        "Adaptability to Feedback",
    ]
    assert [c.max_score for c in criteria] == [25, 25, 20, 15, 15]
    assert gemini.calls == []


def test_fixed_schema_is_copied_per_call():
    first = find_schema("Anchor")
    first[0].max_score = 99
    assert find_schema("Anchor")[0].max_score == 20


def test_unknown_role_uses_gemini_suggestion():
    gemini = FakeGemini(result={
        "criteria": [
            {"criterion": "Costume Handling", "max_score": 40},
            {"criterion": "Crowd Energy", "max_score": 60},
        ]
    })
    service = CriteriaService(gemini=gemini)

    criteria = asyncio.run(service.get_criteria("Mascot"))

    assert [(c.criterion, c.max_score) for c in criteria] == [("Costume Handling", 40), ("Crowd Energy", 60)]
    assert len(gemini.calls) == 1
    assert gemini.calls[0]["model"] is CriteriaSuggestion
    assert "Mascot" in gemini.calls[0]["prompt"]


def test_unknown_role_drops_non_positive_suggestions():
    gemini = FakeGemini(result={
        "criteria": [
            {"criterion": "Crowd Energy", "max_score": 100},
            {"criterion": "Broken", "max_score": 0},
        ]
    })

    criteria = asyncio.run(CriteriaService(gemini=gemini).get_criteria("Mascot"))

    assert [c.criterion for c in criteria] == ["Crowd Energy"]


def test_gemini_failure_raises_no_criteria():
    gemini = FakeGemini(error=RuntimeError("quota exceeded"))

    with pytest.raises(NoCriteriaAvailable):
        asyncio.run(CriteriaService(gemini=gemini).get_criteria("Mascot"))
    assert len(gemini.calls) == 1


def test_empty_suggestion_raises_no_criteria():
    gemini = FakeGemini(result={"criteria": []})

    with pytest.raises(NoCriteriaAvailable):
        asyncio.run(CriteriaService(gemini=gemini).get_criteria("Mascot"))


class RawTextGemini:
    """Returns fixed model text through the real JSON repair path"""

    def __init__(self, text):
        self.text = text

    async def generate_structured_output(self, prompt, expected_model, system_instruction=None, temperature=None):
        return validate_and_repair_json(self.text, expected_model)


@pytest.mark.parametrize("bad_max", ["null", '"n/a"'])
def test_unusable_item_in_raw_output_does_not_discard_the_rest(bad_max):
    text = (
        '{"criteria": ['
        '{"criterion": "Crowd Energy", "maxScore": 60}, '
        '{"criterion": "Costume Handling", "maxScore": "40"}, '
        f'{{"criterion": "Bonus", "maxScore": {bad_max}}}, '
        '{"criterion": "  ", "maxScore": 10}'
        ']}'
    )

    criteria = asyncio.run(CriteriaService(gemini=RawTextGemini(text)).get_criteria("Mascot"))

    assert [(c.criterion, c.max_score) for c in criteria] == [("Crowd Energy", 60), ("Costume Handling", 40)]


def test_raw_output_with_no_usable_items_raises_no_criteria():
    text = '{"criteria": [{"criterion": "Bonus", "maxScore": null}]}'

    with pytest.raises(NoCriteriaAvailable):
        asyncio.run(CriteriaService(gemini=RawTextGemini(text)).get_criteria("Mascot"))
