"""
This file is the module to invoke Google Gemini for the prompt flows.

Every flow sends one fully rendered prompt and expects a single JSON document
back, so the model is asked for `application/json` output.
"""

import asyncio
import logging
import time
from typing import Optional

import google.generativeai as genai

from core.config import GeminiConfigs
from core.model_registry import get_default_model, is_valid_model
from services.llm.errors import ModelServiceError

logger = logging.getLogger(__name__)

# Configure the Gemini API
GEMINI_API_KEY = GeminiConfigs.API_KEY
if GEMINI_API_KEY:
    genai.configure(api_key=GEMINI_API_KEY)


def _resolve_model(model_name: Optional[str], flow_name: str) -> str:
    model_id = model_name or get_default_model()
    if not is_valid_model(model_id):
        raise ModelServiceError(flow_name, f"unknown model '{model_id}'")
    return model_id


def invoke_freeform_prompt(
    prompt: str,
    model_name: Optional[str] = None,
    api_key: Optional[str] = None,
    flow_name: str = "gemini",
    timeout_seconds: Optional[int] = None,
) -> str:
    """
    Send a single prompt to Gemini and return the raw text of the reply.

    Args:
        prompt (str): Fully rendered prompt
        model_name (str, optional): Model id from the model registry
        api_key (str, optional): Overrides GEMINI_API_KEY for this call
        flow_name (str): Used in log lines and error messages
        timeout_seconds (int, optional): Per-call timeout, defaults to GEMINI_TIMEOUT_SECONDS

    Returns:
        str: Raw model output

    Raises:
        ModelServiceError: Missing key, transport failure, timeout, blocked or empty reply
    """
    key = api_key or GEMINI_API_KEY
    if not key:
        raise ModelServiceError(flow_name, "GEMINI_API_KEY environment variable not set")

    model_id = _resolve_model(model_name, flow_name)
    timeout = timeout_seconds or GeminiConfigs.TIMEOUT_SECONDS

    if api_key:
        genai.configure(api_key=api_key)

    start_time = time.time()
    try:
        model = genai.GenerativeModel(model_name=model_id)
        response = model.generate_content(
            prompt,
            generation_config=genai.types.GenerationConfig(
                temperature=GeminiConfigs.TEMPERATURE,
                max_output_tokens=GeminiConfigs.MAX_OUTPUT_TOKENS,
                response_mime_type="application/json",
            ),
            request_options={"timeout": timeout},
        )
    except Exception as e:
        logger.error("gemini_invoker: %s call to %s failed after %.2fs: %s", flow_name, model_id, time.time() - start_time, e)
        raise ModelServiceError(flow_name, f"model call failed: {e}") from e

    try:
        text = response.text
    except ValueError as e:
        # Raised by the SDK when the candidate was blocked or carries no parts
        logger.error("gemini_invoker: %s reply from %s has no text: %s", flow_name, model_id, e)
        raise ModelServiceError(flow_name, f"model returned no text: {e}") from e

    if not text or not text.strip():
        raise ModelServiceError(flow_name, "model returned an empty reply")

    logger.info(
        "gemini_invoker: %s completed with model=%s in %.2fs (prompt chars=%d, reply chars=%d)",
        flow_name, model_id, time.time() - start_time, len(prompt), len(text),
    )
    return text


async def invoke_freeform_prompt_async(
    prompt: str,
    model_name: Optional[str] = None,
    api_key: Optional[str] = None,
    flow_name: str = "gemini",
    timeout_seconds: Optional[int] = None,
) -> str:
    """Run invoke_freeform_prompt in a worker thread so the event loop stays free."""
    return await asyncio.to_thread(
        invoke_freeform_prompt,
        prompt,
        model_name,
        api_key,
        flow_name,
        timeout_seconds,
    )
