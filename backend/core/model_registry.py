"""
Model Registry for Gemini Models

Centralized registry of the Gemini models the prompt flows may run against.
"""

from typing import List, Dict, Optional
from dataclasses import dataclass

from core.config import GeminiConfigs


@dataclass
class ModelInfo:
    """Information about a model."""
    id: str  # e.g., "gemini-2.5-flash"
    name: str  # Display name, e.g., "Gemini 2.5 Flash"
    description: str
    provider: str = "google-generativeai"
    token_limit: int = 250_000
    supports_json_mode: bool = True
    available: bool = True


# Registry of all available models
AVAILABLE_MODELS: List[ModelInfo] = [
    ModelInfo(
        id="gemini-2.5-flash",
        name="Gemini 2.5 Flash",
        description="Fast and efficient model, used for all flows by default",
    ),
    ModelInfo(
        id="gemini-2.5-flash-lite",
        name="Gemini 2.5 Flash Lite",
        description="Lightweight version with higher rate limits",
    ),
    ModelInfo(
        id="gemini-2.5-pro",
        name="Gemini 2.5 Pro",
        description="Most capable model, slower on long requirement documents",
    ),
]


def get_model_by_id(model_id: str) -> Optional[ModelInfo]:
    """Get model info by ID."""
    return next((m for m in AVAILABLE_MODELS if m.id == model_id), None)


def get_all_models() -> List[Dict]:
    """Get all available models as dictionaries."""
    default = get_default_model()
    return [
        {
            "id": m.id,
            "name": m.name,
            "description": m.description,
            "is_default": m.id == default,
        }
        for m in AVAILABLE_MODELS
        if m.available
    ]


def is_valid_model(model_id: str) -> bool:
    """Check if a model ID is valid."""
    model = get_model_by_id(model_id)
    return model is not None and model.available


def get_default_model() -> str:
    """Get the default model ID (GEMINI_MODEL when it names a known model)."""
    configured = GeminiConfigs.DEFAULT_MODEL
    if configured and get_model_by_id(configured) is not None:
        return configured
    return "gemini-2.5-flash"
