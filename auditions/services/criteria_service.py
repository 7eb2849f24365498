import logging
import re
from typing import Dict, List, Optional

from auditions.exceptions import NoCriteriaAvailable
from auditions.models.suggestion import CriteriaSuggestion, CriterionSuggestion
from auditions.prompts import marking_criteria

# Hand-authored marking schemas; max scores sum to 100 for each position
CRITERIA_SCHEMAS: Dict[str, List[CriterionSuggestion]] = {
    "anchor": [
        CriterionSuggestion(criterion="Communication Clarity", max_score=20),
        CriterionSuggestion(criterion="Confidence & Stage Presence", max_score=20),
        CriterionSuggestion(criterion="Spontaneity", max_score=20),
        CriterionSuggestion(criterion="Audience Engagement", max_score=20),
        CriterionSuggestion(criterion="Language & Tone Control", max_score=20),
    ],
    "creative designer": [
        CriterionSuggestion(criterion="Creativity & Originality", max_score=25),
        CriterionSuggestion(criterion="Design Sense", max_score=25),
        CriterionSuggestion(criterion="Tool Awareness", max_score=20),
        CriterionSuggestion(criterion="Concept Explanation", max_score=15),
        CriterionSuggestion(criterion="Adaptability to Feedback", max_score=15),
    ],
    "video editor": [
        CriterionSuggestion(criterion="Storytelling Ability", max_score=25),
        CriterionSuggestion(criterion="Technical Editing Skills", max_score=25),
        CriterionSuggestion(criterion="Tool Proficiency", max_score=20),
        CriterionSuggestion(criterion="Creativity & Effects", max_score=15),
        CriterionSuggestion(criterion="Time & Workflow Awareness", max_score=15),
    ],
    "logistics & operations": [
        CriterionSuggestion(criterion="Planning & Organization", max_score=25),
        CriterionSuggestion(criterion="Problem Solving", max_score=25),
        CriterionSuggestion(criterion="Responsibility & Reliability", max_score=20),
        CriterionSuggestion(criterion="Communication & Coordination", max_score=15),
        CriterionSuggestion(criterion="Availability & Commitment", max_score=15),
    ],
}

DEFAULT_CRITERION = CriterionSuggestion(criterion="Overall Performance", max_score=100)


def normalize_role(role: str) -> str:
    return re.sub(r"\s+", " ", (role or "").strip()).casefold()


def find_schema(role: str) -> Optional[List[CriterionSuggestion]]:
    """Fixed schema for a known position, None otherwise"""
    schema = CRITERIA_SCHEMAS.get(normalize_role(role))
    if schema is None:
        return None
    return [c.model_copy() for c in schema]


class CriteriaService:
    """
    Marking criteria provider: fixed schema first, one AI call otherwise
    """

    def __init__(self, gemini=None):
        if gemini is None:
            from auditions.services.gemini_service import get_gemini_service
            gemini = get_gemini_service()
        self.gemini = gemini

    async def get_criteria(self, role: str) -> List[CriterionSuggestion]:
        schema = find_schema(role)
        if schema is not None:
            logging.info(f"Using fixed marking schema for {role!r}")
            return schema

        logging.info(f"No fixed schema for {role!r}, asking Gemini for criteria")
        try:
            result = await self.gemini.generate_structured_output(
                prompt=marking_criteria.get_marking_criteria_prompt(role),
                expected_model=CriteriaSuggestion,
                system_instruction=marking_criteria.CRITERIA_SYSTEM_INSTRUCTION,
                temperature=0.2,
            )
        except Exception as e:
            logging.warning(f"Criteria suggestion failed for {role!r}: {e}")
            raise NoCriteriaAvailable(f"Could not generate marking criteria for {role!r}") from e

        criteria = []
        for item in result.get("criteria", []):
            suggestion = CriterionSuggestion.model_validate(item)
            if not suggestion.criterion or suggestion.max_score <= 0:
                logging.warning(f"Discarding unusable criterion suggestion: {item}")
                continue
            criteria.append(suggestion)

        if not criteria:
            raise NoCriteriaAvailable(f"AI returned no criteria for {role!r}")

        total = sum(c.max_score for c in criteria)
        if total != 100:
            logging.warning(f"Suggested criteria for {role!r} sum to {total}, not 100")

        return criteria


_criteria_service = None

def get_criteria_service() -> CriteriaService:
    global _criteria_service
    if _criteria_service is None:
        _criteria_service = CriteriaService()
    return _criteria_service
