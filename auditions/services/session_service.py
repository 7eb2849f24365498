import logging
import secrets
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from auditions.config import get_settings
from auditions.models.auth import Role
from auditions.services.evaluation_workflow_service import EvaluationWorkflow


@dataclass
class PanelSession:
    token: str
    role: Role
    workflow: EvaluationWorkflow


class SessionStore:
    """
    In-process login gate.

    Passwords are fixed per role and compared as plain strings; tokens never
    expire, but at most ``max_sessions`` are kept and the oldest is dropped
    first. This is an access convenience for a single event, not a security
    boundary.
    """

    def __init__(self, settings=None, workflow_factory: Callable[[], EvaluationWorkflow] = EvaluationWorkflow):
        self.settings = settings or get_settings()
        self.workflow_factory = workflow_factory
        self._sessions: Dict[str, PanelSession] = {}

    def _password_for(self, role: Role) -> str:
        if role is Role.ADMIN:
            return self.settings.admin_password
        return self.settings.panel_password

    def login(self, role: Role, password: str) -> Optional[PanelSession]:
        if password != self._password_for(role):
            logging.info(f"Rejected {role.value} login")
            return None

        # Oldest sessions go first once the store is full
        while len(self._sessions) >= max(self.settings.max_sessions, 1):
            oldest = next(iter(self._sessions))
            evicted = self._sessions.pop(oldest)
            logging.info(f"Evicted oldest {evicted.role.value} session")

        token = secrets.token_urlsafe(32)
        session = PanelSession(token=token, role=role, workflow=self.workflow_factory())
        self._sessions[token] = session
        logging.info(f"Started {role.value} session")
        return session

    def get(self, token: Optional[str]) -> Optional[PanelSession]:
        if not token:
            return None
        return self._sessions.get(token)

    def logout(self, token: str) -> None:
        session = self._sessions.pop(token, None)
        if session:
            logging.info(f"Ended {session.role.value} session")


_session_store = None

def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store
