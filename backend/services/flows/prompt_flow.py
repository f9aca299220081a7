"""
Prompt flow runner.

A prompt flow pairs one instruction template with an input schema and an output
schema. Running a flow validates the input, renders the template, sends it to
Gemini and decodes the reply into the output schema. No retries.
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from core.config import AgentLogConfigs
from core.logging_config import get_agent_log_dir
from services.llm.errors import SchemaValidationError
from services.llm.gemini import gemini_invoker
from services.llm.gemini.json_output_parser import get_format_instructions, parse_flow_output
from services.llm.prompt_loader import load_prompt

logger = logging.getLogger(__name__)


def _yellow(text: str) -> str:
    return f"\033[33m{text}\033[0m"


def _blue(text: str) -> str:
    return f"\033[34m{text}\033[0m"


def _render_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (list, tuple)):
        return ", ".join(_render_value(v) for v in value)
    return str(value)


def _dump_output_file(flow_name: str, text: str) -> Optional[str]:
    try:
        base = get_agent_log_dir("flows")
        ts = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S-%f")
        output_file = os.path.join(base, f"{ts}-{flow_name}-raw-output.txt")
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(text)
        return output_file
    except OSError as e:
        logger.warning("prompt_flow: failed to write %s output to file: %s", flow_name, e)
        return None


class PromptFlow:
    """One named request/response prompt over Gemini."""

    def __init__(
        self,
        name: str,
        env_prefix: str,
        prompt_module: str,
        input_model: Type[BaseModel],
        output_model: Type[BaseModel],
        description: str = "",
    ):
        self.name = name
        self.env_prefix = env_prefix
        self.prompt_module = prompt_module
        self.input_model = input_model
        self.output_model = output_model
        self.description = description

    def validate_input(self, data: Any) -> BaseModel:
        """Coerce `data` into the input model or raise SchemaValidationError."""
        if isinstance(data, self.input_model):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        if not isinstance(data, dict):
            raise SchemaValidationError(self.name, f"expected an object, got {type(data).__name__}")
        try:
            return self.input_model.model_validate(data)
        except ValidationError as e:
            raise SchemaValidationError(self.name, str(e)) from e

    def render(self, payload: BaseModel) -> str:
        """Fill the template placeholders from the payload and append the output format instructions."""
        template = load_prompt(self.env_prefix, self.prompt_module)
        prompt = template
        for field_name in self.input_model.model_fields:
            prompt = prompt.replace("{{" + field_name + "}}", _render_value(getattr(payload, field_name)))
        return prompt.strip() + "\n\n" + get_format_instructions(self.output_model)

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_model.model_json_schema(),
            "output_schema": self.output_model.model_json_schema(),
        }

    def _log_system_prompt(self, prompt: str) -> None:
        if not AgentLogConfigs.LOG_AGENT_SYSTEM_PROMPT:
            return
        text = prompt
        if len(text) > AgentLogConfigs.LOG_AGENT_SYSTEM_PROMPT_MAX_LENGTH:
            text = text[:AgentLogConfigs.LOG_AGENT_SYSTEM_PROMPT_MAX_LENGTH] + "... [TRUNCATED]"
        logger.info(_yellow("prompt_flow: %s SYSTEM PROMPT (input):\n%s"), self.name, text)

    def _log_raw_output(self, raw: str) -> None:
        too_long = len(raw) > AgentLogConfigs.LOG_AGENT_RAW_OUTPUT_MAX_LENGTH
        if AgentLogConfigs.LOG_AGENT_OUTPUT_TO_FILE or (AgentLogConfigs.LOG_AGENT_RAW_OUTPUT and too_long):
            output_file = _dump_output_file(self.name, raw)
            if output_file:
                logger.info("prompt_flow: %s complete output written to file: %s (length=%d)", self.name, output_file, len(raw))
        if not AgentLogConfigs.LOG_AGENT_RAW_OUTPUT:
            return
        if too_long:
            preview = raw[:AgentLogConfigs.LOG_AGENT_RAW_OUTPUT_MAX_LENGTH] + "... [TRUNCATED]"
            logger.info(_blue("prompt_flow: %s RAW output (preview):\n%s"), self.name, preview)
        else:
            logger.info(_blue("prompt_flow: %s RAW output (complete):\n%s"), self.name, raw)

    async def run(self, data: Any, model_name: Optional[str] = None) -> BaseModel:
        """
        Execute the flow.

        Args:
            data: Input model instance or plain dict
            model_name: Optional model id override

        Returns:
            Instance of the flow's output model

        Raises:
            SchemaValidationError: Input does not match the input schema
            ModelServiceError: Gemini call failed
            ModelOutputError: Reply could not be decoded into the output schema
        """
        payload = self.validate_input(data)
        prompt = self.render(payload)
        self._log_system_prompt(prompt)

        logger.info("prompt_flow: invoking %s (model=%s)", self.name, model_name or "default")
        raw = await gemini_invoker.invoke_freeform_prompt_async(
            prompt, model_name=model_name, flow_name=self.name
        )
        self._log_raw_output(raw)

        result = parse_flow_output(self.name, self.output_model, raw)
        logger.info("prompt_flow: %s completed", self.name)
        return result
