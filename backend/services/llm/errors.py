"""
Errors raised by the prompt flows.

Every failure of a flow call is one of three kinds: the caller sent input that
does not fit the flow's input schema, the model replied with something that
cannot be coerced to the output schema, or the model service itself failed.
"""


class FlowError(Exception):
    """Base class for prompt flow failures."""

    kind = "flow_error"

    def __init__(self, flow_name: str, message: str):
        self.flow_name = flow_name
        self.message = message
        super().__init__(f"{flow_name}: {message}")


class SchemaValidationError(FlowError):
    """Flow input did not match the flow's input schema. No model call was made."""

    kind = "schema_validation"


class ModelOutputError(FlowError):
    """The model replied but the reply could not be decoded into the output schema."""

    kind = "model_output"

    def __init__(self, flow_name: str, message: str, raw_output: str = ""):
        super().__init__(flow_name, message)
        self.raw_output = raw_output


class ModelServiceError(FlowError):
    """The model service was unreachable, timed out, refused the call or is not configured."""

    kind = "model_service"
