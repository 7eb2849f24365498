from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from auditions.databases.database import get_db
from auditions.exceptions import ResetError
from auditions.models.auth import Role
from auditions.models.dashboard import DashboardSummary, MarkingRow, ParticipantsResponse
from auditions.repository import contestant_repository
from auditions.services import dashboard_service
from auditions.services.session_service import PanelSession
from auditions.api.auth import require_role
from auditions.utils.response import create_response

router = APIRouter()

admin_only = require_role(Role.ADMIN)


@router.get("/admin/dashboard", response_model=DashboardSummary)
async def get_dashboard(db: Session = Depends(get_db), session: PanelSession = Depends(admin_only)):
    """Summary statistics over all contestants"""
    try:
        return dashboard_service.summarize(contestant_repository.find_all(db))
    except Exception as e:
        logging.error(f"Failed to build dashboard: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard data.")


@router.post("/admin/reset")
async def reset_evaluations(db: Session = Depends(get_db), session: PanelSession = Depends(admin_only)):
    """
    Clear every score, criteria list, feedback and timestamp. Irreversible.
    """
    try:
        summary = dashboard_service.reset_all(db, performed_by=session.role.value)
        return create_response(True, "All contestant scores and feedback have been reset.", summary)
    except ResetError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        logging.error(f"Reset failed: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="An error occurred while resetting the data.")


@router.get("/admin/participants", response_model=ParticipantsResponse)
async def get_participants(
    search: Optional[str] = Query(None, description="Name or roll number"),
    position: str = Query("all"),
    sort: str = Query("score"),
    direction: str = Query("descending", pattern="^(ascending|descending)$"),
    db: Session = Depends(get_db),
    session: PanelSession = Depends(admin_only),
):
    try:
        return dashboard_service.list_participants(
            contestant_repository.find_all(db),
            search=search,
            position=position,
            sort_key=sort,
            descending=direction == "descending",
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/admin/markings", response_model=List[MarkingRow])
async def get_markings(
    search: Optional[str] = Query(None, description="Name or roll number"),
    db: Session = Depends(get_db),
    session: PanelSession = Depends(admin_only),
):
    """Evaluated contestants with per-criterion breakdown and feedback"""
    return dashboard_service.list_markings(contestant_repository.find_evaluated(db), search=search)
