"""
Prompt Flow API Endpoints

Developer endpoints to inspect the prompt flows and run one directly.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, HTTPException, Query, Request

from api.v1.errors import to_http_exception
from core.model_registry import is_valid_model
from core.rate_limit import flow_rate_limit
from services.flows.flow_registry import get_flow, list_flows

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("")
async def read_flows():
    """
    List every prompt flow with its input and output JSON schema.
    """
    return {"flows": list_flows()}


@router.post("/{flow_name}/run")
@flow_rate_limit()
async def run_flow(
    request: Request,
    flow_name: str,
    payload: Dict[str, Any] = Body(...),
    model: Optional[str] = Query(None, description="Model id from /models"),
):
    """
    Run one flow with a raw input object.

    Raises:
        404: Unknown flow
        400: Unknown model
        422/502/503: Input, output or model service failure
    """
    flow = get_flow(flow_name)
    if flow is None:
        raise HTTPException(status_code=404, detail=f"Flow '{flow_name}' not found")
    if model and not is_valid_model(model):
        raise HTTPException(status_code=400, detail=f"Model '{model}' not found")
    try:
        result = await flow.run(payload, model_name=model)
        return result.model_dump(mode="json")
    except Exception as e:
        logger.error("flows: %s run failed: %s", flow_name, e)
        raise to_http_exception(e)
