import logging
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy import update
from sqlalchemy import exc as sa_exc
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

import auditions.databases.model as models
from auditions.exceptions import PersistenceError, ResetError
from auditions.models.contestant import ContestantRecord, MarkingCriterion


def to_record(row: models.Contestant) -> ContestantRecord:
    """Convert a row into a typed record.
    Criteria that fail validation become a typed absence instead of leaking
    half-shaped dicts to callers.
    """
    try:
        return ContestantRecord.model_validate(row)
    except ValidationError as e:
        logging.warning(f"Contestant {row.roll} has malformed criteria, treating as absent: {e}")

    data = {column.name: getattr(row, column.name) for column in row.__table__.columns}
    data["criteria"] = None
    data["feedback"] = data.get("feedback") or ""
    return ContestantRecord.model_validate(data)


def find_by_roll(db: Session, roll: str) -> Optional[ContestantRecord]:
    row = db.get(models.Contestant, roll)
    logging.info(f"Result query: {row}")
    if row is None:
        return None
    return to_record(row)


def find_all(db: Session) -> List[ContestantRecord]:
    rows = db.query(models.Contestant).order_by(models.Contestant.roll).all()
    logging.info(f"Fetched {len(rows)} contestants")
    return [to_record(row) for row in rows]


def find_evaluated(db: Session) -> List[ContestantRecord]:
    """Evaluated contestants, highest score first"""
    rows = (
        db.query(models.Contestant)
        .filter(models.Contestant.score.isnot(None))
        .order_by(models.Contestant.score.desc(), models.Contestant.roll)
        .all()
    )
    logging.info(f"Fetched {len(rows)} evaluated contestants")
    return [to_record(row) for row in rows]


def update_evaluation(
    db: Session,
    roll: str,
    criteria: List[MarkingCriterion],
    score: float,
    feedback: str,
    performed_by: str = "panel",
) -> None:
    """
    Write criteria, total, feedback and a fresh timestamp in one transaction.
    Nothing is applied unless the whole update commits.
    """
    try:
        result = db.execute(
            update(models.Contestant)
            .where(models.Contestant.roll == roll)
            .values(
                criteria=[c.model_dump() for c in criteria],
                score=score,
                feedback=feedback,
                updated_at=func.now(),
            )
        )
        if result.rowcount != 1:
            raise PersistenceError(f"Contestant {roll} disappeared before save")

        db.add(models.EvaluationAudit(action="save", roll=roll, score=score, performed_by=performed_by))
        db.commit()
        logging.info(f"Saved evaluation for {roll}: score={score}")
    except PersistenceError:
        db.rollback()
        raise
    except sa_exc.SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Failed to save evaluation for {roll}: {e}")
        raise PersistenceError(f"Failed to save evaluation for {roll}") from e


def reset_all(db: Session, performed_by: str = "admin") -> int:
    """
    Clear score, criteria, feedback and timestamp on every contestant as a
    single batch. Identity and contact fields are left untouched.
    """
    try:
        result = db.execute(
            update(models.Contestant).values(
                criteria=None,
                score=None,
                feedback="",
                updated_at=None,
            )
        )
        affected = result.rowcount
        db.add(models.EvaluationAudit(action="reset", affected=affected, performed_by=performed_by))
        db.commit()
        logging.info(f"Reset evaluation data for {affected} contestants")
        return affected
    except sa_exc.SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Bulk reset failed, rolled back: {e}")
        raise ResetError("An error occurred while resetting the data") from e
