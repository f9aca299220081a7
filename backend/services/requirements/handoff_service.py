import logging
from typing import Optional

from sqlalchemy.orm import Session

from models.requirements.analysis_handoff import AnalysisHandoff
from schemas.generator.flow_schemas import (
    ComplianceCheckOutput,
    ProjectDetails,
    ValidateRequirementsOutput,
)
from schemas.requirements.intake import RequirementsAnalysis

logger = logging.getLogger(__name__)


def _live_query(db: Session, workspace_id: str):
    return db.query(AnalysisHandoff).filter(
        AnalysisHandoff.workspace_id == workspace_id,
        AnalysisHandoff.is_deleted == False,  # noqa: E712
    )


def save_handoff(db: Session, workspace_id: str, analysis: RequirementsAnalysis) -> AnalysisHandoff:
    """
    Write the analysis hand-off for a workspace, replacing any live record.

    Args:
        db: Database session
        workspace_id: Owning workspace
        analysis: Completed requirements analysis

    Returns:
        The new AnalysisHandoff row
    """
    for existing in _live_query(db, workspace_id).all():
        existing.is_deleted = True

    record = AnalysisHandoff(
        workspace_id=workspace_id,
        requirements=analysis.requirements,
        validation=analysis.validation.model_dump(mode="json"),
        compliance=analysis.compliance.model_dump(mode="json"),
        project_details=analysis.projectDetails.model_dump(mode="json") if analysis.projectDetails else None,
    )
    db.add(record)
    db.flush()
    logger.info("handoff_service: stored analysis hand-off %s for workspace=%s", record.id, workspace_id)
    return record


def load_handoff(db: Session, workspace_id: str) -> Optional[RequirementsAnalysis]:
    """Return the live hand-off for a workspace as a RequirementsAnalysis, or None."""
    record = _live_query(db, workspace_id).order_by(AnalysisHandoff.created_at.desc()).first()
    if record is None:
        return None
    return RequirementsAnalysis(
        validation=ValidateRequirementsOutput.model_validate(record.validation),
        compliance=ComplianceCheckOutput.model_validate(record.compliance),
        requirements=record.requirements,
        projectDetails=ProjectDetails.model_validate(record.project_details) if record.project_details else None,
    )


def clear_handoff(db: Session, workspace_id: str) -> int:
    """Soft delete every live hand-off of a workspace. Returns the number cleared."""
    records = _live_query(db, workspace_id).all()
    for record in records:
        record.is_deleted = True
    if records:
        logger.info("handoff_service: cleared %d hand-off record(s) for workspace=%s", len(records), workspace_id)
    return len(records)
