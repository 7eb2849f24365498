from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional

from auditions.models.evaluation import CriterionView


class PositionCount(BaseModel):
    name: str
    value: int


class DashboardSummary(BaseModel):
    """Admin dashboard statistics"""
    total: int
    evaluated: int
    not_evaluated: int
    average_score_percent: float
    position_distribution: List[PositionCount] = []


class ParticipantRow(BaseModel):
    roll: str
    name: str
    year: str
    branch: str
    preferred_position: str
    score: Optional[float] = None


class ParticipantsResponse(BaseModel):
    positions: List[str]
    participants: List[ParticipantRow]


class MarkingRow(BaseModel):
    """Evaluated contestant with per-criterion breakdown"""
    roll: str
    name: str
    preferred_position: str
    score: float
    max_total: float
    criteria: List[CriterionView] = []
    feedback: str = ""
    updated_at: Optional[datetime] = None


class LeaderboardEntry(BaseModel):
    rank: int
    roll: str
    name: str
    preferred_position: str
    score: float
    percentage: float
