import logging
import os
from datetime import datetime, timezone
from typing import Optional

from core.config import AgentLogConfigs
from core.logging_config import get_agent_log_dir
from db.session import get_db_context
from schemas.generator.flow_schemas import ProjectDetails
from schemas.requirements.intake import AnalyzeResponse, RequirementsAnalysis
from services.requirements.handoff_service import load_handoff, save_handoff
from services.workspace.workspace_service import Workspace


logger = logging.getLogger(__name__)


def _write_snapshot(workspace_id: str, text: str) -> None:
    if not AgentLogConfigs.LOG_AGENT_OUTPUT_TO_FILE:
        return
    try:
        base = get_agent_log_dir("requirements")
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        snap = os.path.join(base, f"{ts}-{workspace_id}-combined.md")
        with open(snap, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("requirements_service: combined document snapshot=%s", snap)
    except OSError as e:
        logger.warning("requirements_service: failed to write combined snapshot: %s", e)


def _store_analysis(workspace: Workspace, analysis: RequirementsAnalysis) -> None:
    workspace.analysis = analysis
    with get_db_context() as db:
        save_handoff(db, workspace.id, analysis)


async def analyze_requirements(workspace: Workspace) -> AnalyzeResponse:
    """
    Start the analysis of a workspace's requirements document.

    Returns the parsed project details for confirmation. When parsing them
    fails the full analysis has already run and is returned instead.
    """
    text = workspace.intake.combined_text
    logger.info("requirements_service: analyze workspace=%s chars=%d", workspace.id, len(text))
    _write_snapshot(workspace.id, text)
    result = await workspace.intake.analyze()
    if result.analysis is not None:
        _store_analysis(workspace, result.analysis)
    return result


async def confirm_analysis(workspace: Workspace, details: Optional[ProjectDetails]) -> RequirementsAnalysis:
    """Run validation and compliance for the workspace and store the result as the hand-off."""
    analysis = await workspace.intake.confirm(details)
    _store_analysis(workspace, analysis)
    return analysis


def get_analysis(workspace: Workspace) -> Optional[RequirementsAnalysis]:
    """Stored analysis for a workspace; falls back to the live hand-off record."""
    if workspace.analysis is not None:
        return workspace.analysis
    with get_db_context() as db:
        return load_handoff(db, workspace.id)
