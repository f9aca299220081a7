"""
Model Management API Endpoints

Endpoints for listing the Gemini models the prompt flows can use.
"""

from fastapi import APIRouter, HTTPException
from core.model_registry import get_all_models, get_default_model, get_model_by_id

router = APIRouter()


@router.get("/models")
async def list_models():
    """
    Get list of all available models.

    Returns:
        List of model objects with id, name, description and the default model id
    """
    return {"models": get_all_models(), "default": get_default_model()}


@router.get("/models/{model_id}")
async def get_model(model_id: str):
    """
    Get information about a specific model.

    Raises:
        404: If model not found
    """
    model = get_model_by_id(model_id)
    if not model:
        raise HTTPException(status_code=404, detail=f"Model '{model_id}' not found")

    return {
        "id": model.id,
        "name": model.name,
        "description": model.description,
        "provider": model.provider,
        "token_limit": model.token_limit,
        "supports_json_mode": model.supports_json_mode,
        "available": model.available,
    }
