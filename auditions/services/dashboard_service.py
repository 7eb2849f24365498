import logging
from collections import Counter
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from auditions.models.contestant import ContestantRecord
from auditions.models.dashboard import (
    DashboardSummary,
    LeaderboardEntry,
    MarkingRow,
    ParticipantRow,
    ParticipantsResponse,
    PositionCount,
)
from auditions.models.evaluation import CriterionView
from auditions.repository import contestant_repository
from auditions.services import scoring

SORTABLE_KEYS = ("roll", "name", "year", "branch", "preferred_position", "score")


def score_percent(record: ContestantRecord) -> float:
    """Score as a percentage of the record's max total (100 without criteria)"""
    return (record.score or 0) / record.max_total * 100


def summarize(records: Iterable[ContestantRecord]) -> DashboardSummary:
    records = list(records)
    evaluated = [r for r in records if r.score is not None]

    average = 0.0
    if evaluated:
        average = sum(score_percent(r) for r in evaluated) / len(evaluated)

    # Counter keeps first-seen order for ties; sorted() is stable
    counts = Counter(r.preferred_position for r in records)
    distribution = [
        PositionCount(name=name, value=value)
        for name, value in sorted(counts.items(), key=lambda item: -item[1])
    ]

    return DashboardSummary(
        total=len(records),
        evaluated=len(evaluated),
        not_evaluated=len(records) - len(evaluated),
        average_score_percent=round(average, 2),
        position_distribution=distribution,
    )


def reset_all(db: Session, performed_by: str = "admin") -> DashboardSummary:
    """Clear every evaluation in one batch and return the fresh summary"""
    affected = contestant_repository.reset_all(db, performed_by=performed_by)
    logging.info(f"Reset requested by {performed_by}: {affected} records cleared")
    return summarize(contestant_repository.find_all(db))


def _matches(record: ContestantRecord, search: Optional[str]) -> bool:
    if not search:
        return True
    term = search.strip().lower()
    return term in record.name.lower() or term in record.roll.lower()


def list_participants(
    records: Iterable[ContestantRecord],
    search: Optional[str] = None,
    position: str = "all",
    sort_key: str = "score",
    descending: bool = True,
) -> ParticipantsResponse:
    """
    Searchable, filterable participant list.
    Records without a value for the sort key always go last.
    """
    if sort_key not in SORTABLE_KEYS:
        raise ValueError(f"Cannot sort by {sort_key!r}")

    records = list(records)
    positions = list(dict.fromkeys(r.preferred_position for r in records))

    rows = [
        r for r in records
        if _matches(r, search) and (position == "all" or r.preferred_position == position)
    ]

    present = [r for r in rows if getattr(r, sort_key) not in (None, "")]
    missing = [r for r in rows if getattr(r, sort_key) in (None, "")]
    present.sort(key=lambda r: getattr(r, sort_key), reverse=descending)

    return ParticipantsResponse(
        positions=["all"] + positions,
        participants=[
            ParticipantRow(
                roll=r.roll,
                name=r.name,
                year=r.year,
                branch=r.branch,
                preferred_position=r.preferred_position,
                score=r.score,
            )
            for r in present + missing
        ],
    )


def list_markings(records: Iterable[ContestantRecord], search: Optional[str] = None) -> List[MarkingRow]:
    """Evaluated contestants with their per-criterion breakdown, best first"""
    evaluated = [r for r in records if r.score is not None and _matches(r, search)]
    evaluated.sort(key=lambda r: r.score, reverse=True)

    rows = []
    for r in evaluated:
        criteria = [
            CriterionView(
                criterion=c.criterion,
                score=c.score or 0,
                max_score=c.max_score,
                weighted_score=round(scoring.weighted_score(c.score or 0, c.max_score), 1),
            )
            for c in r.criteria or []
        ]
        rows.append(
            MarkingRow(
                roll=r.roll,
                name=r.name,
                preferred_position=r.preferred_position,
                score=r.score,
                max_total=r.max_total,
                criteria=criteria,
                feedback=r.feedback,
                updated_at=r.updated_at,
            )
        )
    return rows


def leaderboard(records: Iterable[ContestantRecord]) -> List[LeaderboardEntry]:
    """Public ranking; carries no feedback or contact details"""
    evaluated = sorted(
        (r for r in records if r.score is not None),
        key=lambda r: r.score,
        reverse=True,
    )
    return [
        LeaderboardEntry(
            rank=i,
            roll=r.roll,
            name=r.name,
            preferred_position=r.preferred_position,
            score=r.score,
            percentage=round(score_percent(r), 2),
        )
        for i, r in enumerate(evaluated, start=1)
    ]
