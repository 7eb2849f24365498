from pydantic import BaseModel, Field, field_validator
from enum import Enum
from typing import List, Optional

from auditions.models.contestant import ContestantRecord


class WorkflowState(str, Enum):
    """
    Evaluation workflow states
    """
    IDLE = "idle"
    SEARCHING = "searching"
    NOT_FOUND = "not_found"
    FOUND = "found"
    EVALUATING = "evaluating"
    SAVING = "saving"


class CriteriaSource(str, Enum):
    """Where the criteria on screen came from"""
    SAVED = "saved"
    SCHEMA = "schema"
    DEFAULT = "default"


class SearchRequest(BaseModel):
    """Roll number lookup request"""
    roll: str = Field(...)

    @field_validator('roll')
    def validate_roll(cls, v):
        if not v or len(v.strip()) == 0:
            raise ValueError('Roll number cannot be empty')
        return v.strip().upper()


class ScoreEdit(BaseModel):
    """Slider change for one criterion"""
    index: int = Field(ge=0)
    score: int = Field(ge=0, le=20)


class EvaluationEdit(BaseModel):
    """Edits applied before save"""
    scores: List[ScoreEdit] = []
    feedback: Optional[str] = None


class CriterionView(BaseModel):
    criterion: str
    score: int
    max_score: float
    weighted_score: float


class EvaluationView(BaseModel):
    """
    Everything the panel screen displays for the current lookup
    """
    state: WorkflowState
    roll: Optional[str] = None
    contestant: Optional[ContestantRecord] = None

    criteria: List[CriterionView] = []
    criteria_source: Optional[CriteriaSource] = None
    live_total: float = 0
    max_total: float = 0
    feedback: str = ""

    questions: List[str] = []
    notices: List[str] = []

    class Config:
        json_schema_extra = {
            "example": {
                "state": "evaluating",
                "roll": "CS22A041",
                "criteria": [
                    {"criterion": "Communication Clarity", "score": 15, "max_score": 20, "weighted_score": 15.0},
                    {"criterion": "Spontaneity", "score": 12, "max_score": 20, "weighted_score": 12.0}
                ],
                "criteria_source": "schema",
                "live_total": 27.0,
                "max_total": 40,
                "feedback": "Clear voice, needs more crowd interaction.",
                "questions": ["The mic dies mid-sentence. What do you do?"],
                "notices": []
            }
        }
