from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from auditions.databases.database import get_db
from auditions.exceptions import (
    EvaluationValidationError,
    NotFound,
    PersistenceError,
    WorkflowStateError,
)
from auditions.models.auth import Role
from auditions.models.evaluation import EvaluationEdit, EvaluationView, SearchRequest
from auditions.services.session_service import PanelSession
from auditions.api.auth import require_role
from auditions.utils.response import create_response

router = APIRouter()

panel_only = require_role(Role.PANEL)


@router.post("/panel/search", response_model=EvaluationView)
async def search_contestant(
    request: SearchRequest,
    db: Session = Depends(get_db),
    session: PanelSession = Depends(panel_only),
):
    """
    Look up a contestant by roll number and prepare criteria and questions
    """
    try:
        return await session.workflow.search(db, request.roll)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EvaluationValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Failed to fetch contestant {request.roll}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while fetching the contestant.")


@router.get("/panel/evaluation", response_model=EvaluationView)
async def get_evaluation(session: PanelSession = Depends(panel_only)):
    """Current state of the panel screen"""
    return session.workflow.view()


@router.patch("/panel/evaluation", response_model=EvaluationView)
async def edit_evaluation(request: EvaluationEdit, session: PanelSession = Depends(panel_only)):
    """
    Move sliders and edit feedback; returns the recomputed live total
    """
    try:
        return session.workflow.edit(scores=request.scores, feedback=request.feedback)
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except EvaluationValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/panel/evaluation/save")
async def save_evaluation(
    db: Session = Depends(get_db),
    session: PanelSession = Depends(panel_only),
):
    """
    Validate and persist the current evaluation
    """
    try:
        view = session.workflow.save(db, performed_by=session.role.value)
        return create_response(True, "Evaluation has been saved successfully.", view)
    except WorkflowStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except EvaluationValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=503, detail=f"An error occurred while saving the evaluation: {str(e)}")
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Save failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while saving the evaluation.")
