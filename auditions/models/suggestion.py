from pydantic import BaseModel, ConfigDict, Field
from typing import List


class CriterionSuggestion(BaseModel):
    """A marking criterion with its maximum achievable score"""
    model_config = ConfigDict(populate_by_name=True)

    criterion: str
    max_score: float = Field(alias="maxScore")


class CriteriaSuggestion(BaseModel):
    """LLM output for suggested marking criteria"""
    criteria: List[CriterionSuggestion] = []


class QuestionSuggestion(BaseModel):
    """LLM output for suggested interview questions"""
    questions: List[str] = []
