import logging

from fastapi import HTTPException

from services.llm.errors import (
    FlowError,
    ModelOutputError,
    ModelServiceError,
    SchemaValidationError,
)
from services.requirements.intake_service import AnalysisInProgressError, IntakeError
from services.scenarios.scenario_manager import (
    EditInProgressError,
    GenerationInProgressError,
    NoPendingEditError,
    ScenarioNotFoundError,
    ScenarioValidationError,
)
from services.workspace.workspace_service import WorkspaceNotFoundError

logger = logging.getLogger(__name__)


def _flow_detail(e: FlowError) -> dict:
    return {"error": e.kind, "flow": e.flow_name, "message": e.message}


def to_http_exception(e: Exception) -> HTTPException:
    """Translate a domain or flow error into the HTTPException the API returns."""
    if isinstance(e, HTTPException):
        return e
    if isinstance(e, SchemaValidationError):
        return HTTPException(status_code=422, detail=_flow_detail(e))
    if isinstance(e, ModelOutputError):
        return HTTPException(status_code=502, detail=_flow_detail(e))
    if isinstance(e, ModelServiceError):
        return HTTPException(status_code=503, detail=_flow_detail(e))
    if isinstance(e, FlowError):
        return HTTPException(status_code=500, detail=_flow_detail(e))
    if isinstance(e, (WorkspaceNotFoundError, ScenarioNotFoundError)):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (AnalysisInProgressError, GenerationInProgressError, EditInProgressError, NoPendingEditError)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, ScenarioValidationError):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, IntakeError):
        return HTTPException(status_code=400, detail=str(e))
    logger.error("api: unexpected error: %s", e, exc_info=True)
    return HTTPException(status_code=500, detail=f"Internal error: {e}")
