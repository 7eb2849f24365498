from sqlalchemy import JSON, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.sql import func, text

from .database import Base


class BaseAuditMixin:
    """Reusable audit columns for all tables."""
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Contestant(Base, BaseAuditMixin):
    __tablename__ = "contestants"

    # Roll number is the record key
    roll = Column(String(50), primary_key=True, index=True)

    # Registration details (written externally, never touched by evaluation)
    name = Column(String(255), nullable=False)
    year = Column(String(20), nullable=False, server_default=text("''"))
    branch = Column(String(100), nullable=False, server_default=text("''"))
    section = Column(String(20), nullable=False, server_default=text("''"))
    preferred_position = Column(String(100), nullable=False, index=True)
    whatsapp = Column(String(50), nullable=False, server_default=text("''"))
    mail = Column(String(255), nullable=False, server_default=text("''"))

    # Evaluation
    # criteria: [{"criterion": str, "score": int, "max_score": float}]
    criteria = Column(JSON(none_as_null=True), nullable=True)
    score = Column(Float, nullable=True)
    feedback = Column(Text, nullable=False, server_default=text("''"))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Contestant roll={self.roll} score={self.score}>"


class EvaluationAudit(Base, BaseAuditMixin):
    __tablename__ = "evaluation_audit"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(20), nullable=False)  # 'save' or 'reset'
    roll = Column(String(50), nullable=True, index=True)
    score = Column(Float, nullable=True)
    affected = Column(Integer, nullable=False, server_default=text("1"))
    performed_by = Column(String(20), nullable=False, server_default=text("'system'"))
