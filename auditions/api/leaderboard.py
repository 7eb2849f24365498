from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging

from auditions.databases.database import get_db
from auditions.models.dashboard import LeaderboardEntry
from auditions.repository import contestant_repository
from auditions.services import dashboard_service

router = APIRouter()


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(db: Session = Depends(get_db)):
    """Public ranking of evaluated contestants"""
    try:
        return dashboard_service.leaderboard(contestant_repository.find_evaluated(db))
    except Exception as e:
        logging.error(f"Failed to build leaderboard: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch leaderboard.")
