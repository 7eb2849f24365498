import logging
from typing import List

from auditions.exceptions import SuggestionUnavailable
from auditions.models.suggestion import QuestionSuggestion
from auditions.prompts import interview_questions

MAX_QUESTIONS = 7


class QuestionService:
    """Suggest interview questions for a position, always via Gemini"""

    def __init__(self, gemini=None):
        if gemini is None:
            from auditions.services.gemini_service import get_gemini_service
            gemini = get_gemini_service()
        self.gemini = gemini

    async def get_questions(self, role: str) -> List[str]:
        try:
            result = await self.gemini.generate_structured_output(
                prompt=interview_questions.get_interview_questions_prompt(role),
                expected_model=QuestionSuggestion,
                system_instruction=interview_questions.QUESTIONS_SYSTEM_INSTRUCTION,
            )
        except Exception as e:
            logging.warning(f"Question suggestion failed for {role!r}: {e}")
            raise SuggestionUnavailable("Could not generate suggested questions") from e

        questions = [q for q in result.get("questions", []) if q.strip()]
        if not questions:
            raise SuggestionUnavailable("AI returned no questions")

        if len(questions) > MAX_QUESTIONS:
            logging.info(f"Trimming {len(questions)} suggested questions to {MAX_QUESTIONS}")
        return questions[:MAX_QUESTIONS]


_question_service = None

def get_question_service() -> QuestionService:
    global _question_service
    if _question_service is None:
        _question_service = QuestionService()
    return _question_service
