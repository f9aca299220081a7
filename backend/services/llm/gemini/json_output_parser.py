"""
JSON output parsing for Gemini responses using LangChain.

Flow replies must decode into the flow's pydantic output model. The parsers here
tolerate the usual packaging noise (markdown fences, prose around the JSON, a
bare array where a single-list object was asked for) but never invent data:
missing fields or out-of-range enum values are rejected.
"""

import json
import re
import logging
from typing import Any, Optional, Type

from langchain_core.output_parsers import PydanticOutputParser, BaseOutputParser
from langchain_core.exceptions import OutputParserException
from pydantic import BaseModel, ValidationError

from services.llm.errors import ModelOutputError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


class StrictJSONOutputParser(BaseOutputParser[Any]):
    """
    Extracts the first JSON document (object or array) from an LLM reply.

    Raises OutputParserException when the reply holds no decodable JSON; there
    is no text fallback.
    """

    def parse(self, text: str) -> Any:
        """
        Parse JSON from text, handling fenced or prose-wrapped replies.

        Args:
            text (str): Raw text from LLM that should contain JSON

        Returns:
            Any: Parsed JSON value (dict or list)

        Raises:
            OutputParserException: If no valid JSON can be extracted
        """
        if not text or not text.strip():
            raise OutputParserException("Empty response from LLM")

        # Strategy 1: the whole reply is JSON
        try:
            return json.loads(text.strip())
        except json.JSONDecodeError:
            pass

        # Strategy 2: JSON inside a markdown code fence
        for match in _FENCE_RE.findall(text):
            try:
                return json.loads(match)
            except json.JSONDecodeError:
                continue

        # Strategy 3: first decodable object or array embedded in prose
        decoder = json.JSONDecoder()
        for idx, ch in enumerate(text):
            if ch not in "{[":
                continue
            try:
                value, _ = decoder.raw_decode(text[idx:])
            except json.JSONDecodeError:
                continue
            logger.info("json_output_parser: extracted embedded JSON at offset %d", idx)
            return value

        raise OutputParserException(f"No JSON found in LLM response: {text[:200]}")

    @property
    def _type(self) -> str:
        return "strict_json"


def _single_list_field(model: Type[BaseModel]) -> Optional[str]:
    """Name of the only field of `model` when that field is a list, else None."""
    fields = model.model_fields
    if len(fields) != 1:
        return None
    name, info = next(iter(fields.items()))
    origin = getattr(info.annotation, "__origin__", None)
    return name if origin is list else None


class FlowOutputParser(PydanticOutputParser):
    """
    Pydantic-based output parser for prompt flow replies.

    This ensures type safety and validation of the response structure.
    """

    def __init__(self, output_model: Type[BaseModel]):
        super().__init__(pydantic_object=output_model)

    def parse(self, text: str) -> BaseModel:
        """
        Parse text into a validated instance of the flow's output model.

        Args:
            text (str): Raw text from LLM

        Returns:
            BaseModel: Validated output object

        Raises:
            OutputParserException: Reply is not JSON or does not fit the model
        """
        data = StrictJSONOutputParser().parse(text)

        list_field = _single_list_field(self.pydantic_object)
        if list_field and isinstance(data, list):
            # Model answered with the bare array
            data = {list_field: data}

        if not isinstance(data, dict):
            raise OutputParserException(
                f"Expected a JSON object for {self.pydantic_object.__name__}, got {type(data).__name__}"
            )

        try:
            return self.pydantic_object.model_validate(data)
        except ValidationError as e:
            raise OutputParserException(
                f"Failed to validate {self.pydantic_object.__name__}: {e}",
                llm_output=text,
            ) from e


def parse_flow_output(flow_name: str, output_model: Type[BaseModel], raw_output: str) -> BaseModel:
    """
    Decode a raw flow reply, translating parser failures into ModelOutputError.
    """
    try:
        return FlowOutputParser(output_model).parse(raw_output)
    except OutputParserException as e:
        logger.error("json_output_parser: %s output rejected: %s", flow_name, e)
        raise ModelOutputError(flow_name, str(e), raw_output=raw_output) from e


def get_format_instructions(output_model: Type[BaseModel]) -> str:
    """Format instructions appended to a flow prompt, generated from its output model."""
    return FlowOutputParser(output_model).get_format_instructions()
