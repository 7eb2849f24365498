from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from datetime import datetime
from enum import Enum
from typing import List, Optional


class EvaluationStatus(str, Enum):
    """
    Contestant evaluation status
    """
    EVALUATED = "evaluated"
    PENDING = "pending"


class StoredCriterion(BaseModel):
    """Criterion result as persisted on the contestant record"""
    criterion: str
    # Older records may lack the raw score; the workflow defaults it
    score: Optional[int] = Field(None, ge=0, le=20)
    max_score: float = Field(gt=0, validation_alias=AliasChoices("max_score", "maxScore"))


class MarkingCriterion(BaseModel):
    """Criterion being scored on the panel screen"""
    criterion: str
    score: int = Field(ge=0, le=20)
    max_score: float = Field(gt=0)


class ContestantRecord(BaseModel):
    """Typed view of a contestant row, validated at the store boundary"""
    model_config = ConfigDict(from_attributes=True)

    roll: str
    name: str
    year: str = ""
    branch: str = ""
    section: str = ""
    preferred_position: str
    whatsapp: str = ""
    mail: str = ""

    criteria: Optional[List[StoredCriterion]] = None
    score: Optional[float] = None
    feedback: str = ""
    updated_at: Optional[datetime] = None

    @property
    def status(self) -> EvaluationStatus:
        if self.score is None:
            return EvaluationStatus.PENDING
        return EvaluationStatus.EVALUATED

    @property
    def has_criteria(self) -> bool:
        return bool(self.criteria)

    @property
    def max_total(self) -> float:
        """Sum of max scores, 100 when the record carries no criteria"""
        total = sum(c.max_score for c in self.criteria or [])
        return total if total > 0 else 100.0
