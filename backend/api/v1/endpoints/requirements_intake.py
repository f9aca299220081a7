import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from api.v1.errors import to_http_exception
from core.rate_limit import flow_rate_limit
from deps import get_workspace
from schemas.requirements.intake import (
    ConfirmAnalysisRequest,
    ManualTextRequest,
    TranscriptRequest,
)
from services.llm.errors import FlowError
from services.requirements import requirements_service
from services.requirements.intake_service import IntakeError
from services.workspace.workspace_service import Workspace


router = APIRouter()

logger = logging.getLogger(__name__)


def _state(workspace: Workspace) -> dict:
    return workspace.intake.to_schema().model_dump(mode="json")


@router.get("/{workspace_id}/intake")
def read_intake(workspace: Workspace = Depends(get_workspace)):
    return _state(workspace)


@router.post("/{workspace_id}/intake/files")
async def upload_files(
    workspace: Workspace = Depends(get_workspace),
    files: List[UploadFile] = File(...),
):
    """
    Add uploaded files to the document. Each file is queued, read as text and
    marked Ready (or Failed). Unsupported types reject the whole request.
    """
    intake = workspace.intake
    try:
        queued = [(intake.queue_file(f.filename or "", f.size or 0), f) for f in files]
    except IntakeError as e:
        raise to_http_exception(e)

    results = []
    for uploaded, upload in queued:
        try:
            data = await upload.read()
            intake.read_file(uploaded.id, data)
        except OSError as e:
            uploaded.fail(str(e))
        results.append(uploaded.to_schema().model_dump())
    logger.info("requirements_intake: workspace=%s uploaded %d file(s)", workspace.id, len(results))
    return {"files": results, "intake": _state(workspace)}


@router.delete("/{workspace_id}/intake/files/{file_id}")
def remove_file(file_id: str, workspace: Workspace = Depends(get_workspace)):
    try:
        workspace.intake.remove_file(file_id)
    except IntakeError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _state(workspace)


@router.put("/{workspace_id}/intake/manual-text")
def set_manual_text(payload: ManualTextRequest, workspace: Workspace = Depends(get_workspace)):
    workspace.intake.set_manual_text(payload.text)
    return _state(workspace)


@router.post("/{workspace_id}/intake/dictation/{action}")
def dictation_action(action: str, workspace: Workspace = Depends(get_workspace)):
    """Drive the dictation session: start, stop, cancel, accept or discard."""
    dictation = workspace.intake.dictation
    handlers = {
        "start": dictation.start,
        "stop": dictation.stop,
        "cancel": dictation.cancel,
        "accept": workspace.intake.accept_dictation,
        "discard": dictation.discard,
    }
    handler = handlers.get(action)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"Unknown dictation action '{action}'")
    try:
        handler()
    except IntakeError as e:
        raise to_http_exception(e)
    return _state(workspace)


@router.put("/{workspace_id}/intake/dictation/transcript")
def update_transcript(payload: TranscriptRequest, workspace: Workspace = Depends(get_workspace)):
    try:
        workspace.intake.dictation.update_transcript(payload.transcript)
    except IntakeError as e:
        raise to_http_exception(e)
    return _state(workspace)


@router.post("/{workspace_id}/intake/analyze")
@flow_rate_limit()
async def analyze(request: Request, workspace: Workspace = Depends(get_workspace)):
    """
    Parse project details for confirmation. If parsing fails, the analysis
    runs immediately and its result is returned in `analysis`.
    """
    try:
        result = await requirements_service.analyze_requirements(workspace)
        return result.model_dump(mode="json")
    except HTTPException:
        raise
    except FlowError as e:
        logger.error("requirements_intake: analysis failed for workspace=%s: %s", workspace.id, e)
        raise to_http_exception(e)
    except Exception as e:
        raise to_http_exception(e)


@router.post("/{workspace_id}/intake/confirm")
@flow_rate_limit()
async def confirm(
    request: Request,
    payload: ConfirmAnalysisRequest,
    workspace: Workspace = Depends(get_workspace),
):
    """Run completeness validation and the compliance check with the confirmed details."""
    try:
        analysis = await requirements_service.confirm_analysis(workspace, payload.projectDetails)
        return analysis.model_dump(mode="json")
    except HTTPException:
        raise
    except FlowError as e:
        logger.error("requirements_intake: analysis failed for workspace=%s: %s", workspace.id, e)
        raise to_http_exception(e)
    except Exception as e:
        raise to_http_exception(e)
