import asyncio
import logging
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from auditions.config import get_settings
from auditions.exceptions import (
    EvaluationValidationError,
    NoCriteriaAvailable,
    NotFound,
    PersistenceError,
    SuggestionUnavailable,
    WorkflowStateError,
)
from auditions.models.contestant import ContestantRecord, MarkingCriterion
from auditions.models.evaluation import (
    CriteriaSource,
    CriterionView,
    EvaluationView,
    ScoreEdit,
    WorkflowState,
)
from auditions.repository import contestant_repository
from auditions.services import scoring
from auditions.services.criteria_service import DEFAULT_CRITERION

DEFAULT_RAW_SCORE = 10

# States in which a contestant is loaded and can be edited or saved
EDITABLE_STATES = (WorkflowState.FOUND, WorkflowState.EVALUATING)


def choose_criteria_source(record: ContestantRecord) -> CriteriaSource:
    """
    Decision table for populating criteria after a lookup:

    =====================  ==========================================
    saved criteria          action
    =====================  ==========================================
    present, non-empty      reuse verbatim (missing raw score -> 10)
    absent or empty         ask the criteria provider; on any failure
                            fall back to the single default criterion
    =====================  ==========================================
    """
    if record.has_criteria:
        return CriteriaSource.SAVED
    return CriteriaSource.SCHEMA


def saved_criteria(record: ContestantRecord) -> List[MarkingCriterion]:
    return [
        MarkingCriterion(
            criterion=c.criterion,
            score=c.score if c.score is not None else DEFAULT_RAW_SCORE,
            max_score=c.max_score,
        )
        for c in record.criteria or []
    ]


class EvaluationWorkflow:
    """
    Panel evaluation of one contestant at a time.

    idle -> searching -> not_found | found -> evaluating -> saving -> found
    Searching again from any state discards unsaved edits.
    """

    def __init__(self, criteria_service=None, question_service=None, settings=None):
        self._criteria_service = criteria_service
        self._question_service = question_service
        self.settings = settings or get_settings()
        self.reset()

    @property
    def criteria_service(self):
        if self._criteria_service is None:
            from auditions.services.criteria_service import get_criteria_service
            self._criteria_service = get_criteria_service()
        return self._criteria_service

    @property
    def question_service(self):
        if self._question_service is None:
            from auditions.services.question_service import get_question_service
            self._question_service = get_question_service()
        return self._question_service

    def reset(self) -> None:
        self.state = WorkflowState.IDLE
        self.roll: Optional[str] = None
        self.contestant: Optional[ContestantRecord] = None
        self.criteria: List[MarkingCriterion] = []
        self.criteria_source: Optional[CriteriaSource] = None
        self.questions: List[str] = []
        self.feedback = ""
        self.notices: List[str] = []

    async def search(self, db: Session, roll: str) -> EvaluationView:
        self.reset()

        key = (roll or "").strip().upper()
        if not key:
            raise EvaluationValidationError("Roll number cannot be empty")

        self.state = WorkflowState.SEARCHING
        self.roll = key
        try:
            record = contestant_repository.find_by_roll(db, key)
        except Exception:
            self.reset()
            raise

        if record is None:
            logging.info(f"No contestant found for roll {key}")
            self.state = WorkflowState.NOT_FOUND
            raise NotFound(key)

        self.contestant = record
        self.feedback = record.feedback
        self.state = WorkflowState.FOUND

        # Criteria and questions resolve independently, in either order
        await asyncio.gather(
            self._populate_criteria(record),
            self._populate_questions(record),
        )

        logging.info(
            f"Loaded {key}: {len(self.criteria)} criteria ({self.criteria_source.value}), "
            f"{len(self.questions)} questions"
        )
        return self.view()

    async def _populate_criteria(self, record: ContestantRecord) -> None:
        if choose_criteria_source(record) is CriteriaSource.SAVED:
            self.criteria = saved_criteria(record)
            self.criteria_source = CriteriaSource.SAVED
            return

        try:
            suggestions = await self.criteria_service.get_criteria(record.preferred_position)
            self.criteria_source = CriteriaSource.SCHEMA
        except NoCriteriaAvailable as e:
            logging.warning(f"Using default criterion for {record.roll}: {e}")
            suggestions = [DEFAULT_CRITERION]
            self.criteria_source = CriteriaSource.DEFAULT
            self.notices.append("Could not generate marking criteria. Using default.")
        except Exception as e:
            logging.error(f"Criteria provider error for {record.roll}: {e}", exc_info=True)
            suggestions = [DEFAULT_CRITERION]
            self.criteria_source = CriteriaSource.DEFAULT
            self.notices.append("Could not generate marking criteria. Using default.")

        self.criteria = [
            MarkingCriterion(criterion=s.criterion, score=DEFAULT_RAW_SCORE, max_score=s.max_score)
            for s in suggestions
        ]

    async def _populate_questions(self, record: ContestantRecord) -> None:
        try:
            self.questions = await self.question_service.get_questions(record.preferred_position)
        except SuggestionUnavailable as e:
            logging.warning(f"No suggested questions for {record.roll}: {e}")
            self.questions = []
            self.notices.append("Could not generate suggested questions.")
        except Exception as e:
            logging.error(f"Question provider error for {record.roll}: {e}", exc_info=True)
            self.questions = []
            self.notices.append("Could not generate suggested questions.")

    def _require_contestant(self) -> None:
        if self.state not in EDITABLE_STATES or self.contestant is None:
            raise WorkflowStateError(f"No contestant loaded (state: {self.state.value})")

    def edit(self, scores: Iterable[ScoreEdit] = (), feedback: Optional[str] = None) -> EvaluationView:
        """Apply slider and feedback edits; the total is recomputed, never persisted"""
        self._require_contestant()

        scores = list(scores)
        for edit in scores:
            if edit.index >= len(self.criteria):
                raise EvaluationValidationError(f"No criterion at position {edit.index}")
            if not 0 <= edit.score <= scoring.SLIDER_MAX:
                raise EvaluationValidationError(f"Score must be between 0 and {scoring.SLIDER_MAX}")

        for edit in scores:
            self.criteria[edit.index] = self.criteria[edit.index].model_copy(update={"score": edit.score})
        if feedback is not None:
            self.feedback = feedback

        self.state = WorkflowState.EVALUATING
        return self.view()

    def validate(self) -> str:
        """Return the trimmed feedback or raise if the evaluation cannot be saved"""
        if not self.criteria:
            raise EvaluationValidationError("At least one criterion must be scored.")

        feedback = self.feedback.strip()
        if len(feedback) < self.settings.feedback_min_length:
            raise EvaluationValidationError(
                f"Feedback must be at least {self.settings.feedback_min_length} characters."
            )
        if len(feedback) > self.settings.feedback_max_length:
            raise EvaluationValidationError(
                f"Feedback cannot exceed {self.settings.feedback_max_length} characters."
            )
        return feedback

    def save(self, db: Session, performed_by: str = "panel") -> EvaluationView:
        self._require_contestant()
        feedback = self.validate()

        self.state = WorkflowState.SAVING
        total = scoring.aggregate(self.criteria)
        try:
            contestant_repository.update_evaluation(
                db,
                roll=self.contestant.roll,
                criteria=self.criteria,
                score=total,
                feedback=feedback,
                performed_by=performed_by,
            )
        except PersistenceError:
            self.state = WorkflowState.EVALUATING
            raise
        except Exception as e:
            logging.error(f"Unexpected error saving {self.contestant.roll}: {e}", exc_info=True)
            self.state = WorkflowState.EVALUATING
            raise

        roll = self.contestant.roll
        record = contestant_repository.find_by_roll(db, roll)
        if record is None:
            self.reset()
            raise NotFound(roll)

        self.contestant = record
        self.feedback = record.feedback
        self.criteria = saved_criteria(record)
        self.criteria_source = CriteriaSource.SAVED
        self.state = WorkflowState.FOUND
        return self.view()

    def view(self) -> EvaluationView:
        return EvaluationView(
            state=self.state,
            roll=self.roll,
            contestant=self.contestant,
            criteria=[
                CriterionView(
                    criterion=c.criterion,
                    score=c.score,
                    max_score=c.max_score,
                    weighted_score=round(scoring.weighted_score(c.score, c.max_score), 1),
                )
                for c in self.criteria
            ],
            criteria_source=self.criteria_source,
            live_total=scoring.aggregate(self.criteria),
            max_total=scoring.max_total(self.criteria),
            feedback=self.feedback,
            questions=list(self.questions),
            notices=list(self.notices),
        )
