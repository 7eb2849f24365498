from fastapi import APIRouter, Depends, Header, HTTPException
from typing import Optional
import logging

from auditions.models.auth import LoginRequest, LoginResponse, Role
from auditions.services.session_service import PanelSession, SessionStore, get_session_store
from auditions.utils.response import create_response

router = APIRouter()


def get_current_session(
    authorization: Optional[str] = Header(None),
    store: SessionStore = Depends(get_session_store),
) -> PanelSession:
    """Resolve the bearer token into a session"""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()

    session = store.get(token)
    if session is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return session


def require_role(role: Role):
    def dependency(session: PanelSession = Depends(get_current_session)) -> PanelSession:
        if session.role is not role:
            raise HTTPException(status_code=403, detail=f"This page is only available to {role.value}")
        return session
    return dependency


@router.post("/auth/login")
async def login(request: LoginRequest, store: SessionStore = Depends(get_session_store)):
    """
    Exchange a role password for a session token
    """
    session = store.login(request.role, request.password)
    if session is None:
        raise HTTPException(status_code=401, detail="Invalid password")

    data = LoginResponse(token=session.token, role=session.role)
    return create_response(True, "Login successful", data)


@router.post("/auth/logout")
async def logout(
    session: PanelSession = Depends(get_current_session),
    store: SessionStore = Depends(get_session_store),
):
    store.logout(session.token)
    logging.info(f"Logged out {session.role.value}")
    return create_response(True, "Logged out")


@router.get("/auth/me")
async def me(session: PanelSession = Depends(get_current_session)):
    return {"role": session.role}
