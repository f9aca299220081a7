import uuid
from sqlalchemy import (
    Column,
    DateTime,
    String,
    Boolean,
    Text,
    JSON,
    Uuid,
    func,
)

from ..base import Base


class AnalysisHandoff(Base):
    """
    Analysis hand-off record written when requirements intake completes and
    consumed (soft deleted) once scenarios have been derived from it.
    At most one live row exists per workspace.
    """

    __tablename__ = "analysis_handoffs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    workspace_id = Column(String(64), nullable=False, index=True)

    requirements = Column(Text, nullable=False)
    validation = Column(JSON, nullable=False)
    compliance = Column(JSON, nullable=False)
    # Confirmed project details, when the user confirmed any
    project_details = Column(JSON, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(
        DateTime, default=func.now(), onupdate=func.now(), nullable=False
    )

    # Soft delete flag
    is_deleted = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<AnalysisHandoff(id='{self.id}', workspace_id='{self.workspace_id}')>"
