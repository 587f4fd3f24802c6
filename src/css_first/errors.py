class CSSFirstError(Exception):
    """Base class for errors raised by the suggestion engine."""


class InvalidArgumentError(CSSFirstError, ValueError):
    """
    A caller broke the input contract (wrong type or out-of-range value).

    The message is safe to return to MCP clients as-is.
    """

    def __init__(self, argument: str, message: str):
        self.argument = argument
        self.message = message
        super().__init__(f"Invalid argument '{argument}': {message}")


class DocumentationParseError(CSSFirstError):
    """A documentation page was fetched but carried no usable support data."""

    def __init__(self, property_id: str, reason: str):
        self.property_id = property_id
        self.reason = reason
        super().__init__(f"Could not parse documentation for {property_id}: {reason}")
