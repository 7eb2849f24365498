"""Domain errors raised by the evaluation services.

Every failure in this service degrades to a visible message and leaves the
previous consistent state in place; none of these is fatal to the process.
"""


class AuditionError(Exception):
    """Base class for audition service errors"""


class NotFound(AuditionError):
    """Lookup key is absent from the record store"""

    def __init__(self, roll: str):
        self.roll = roll
        super().__init__(f"No contestant found with roll number {roll}")


class NoCriteriaAvailable(AuditionError):
    """Neither a fixed schema nor the AI produced marking criteria"""


class SuggestionUnavailable(AuditionError):
    """The AI could not suggest interview questions"""


class EvaluationValidationError(AuditionError):
    """Evaluation input violates feedback or criteria rules"""


class WorkflowStateError(AuditionError):
    """Operation not allowed in the current workflow state"""


class PersistenceError(AuditionError):
    """Writing an evaluation to the record store failed"""


class ResetError(AuditionError):
    """The bulk reset batch failed and was rolled back"""
