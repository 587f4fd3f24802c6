"""
Base class for CSS First tools exposed through FastMCP.
"""

import json
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Tool(ABC):
    """A single MCP tool; the public contract is the signature of ``apply``."""

    @classmethod
    def get_name_from_cls(cls) -> str:
        """Get tool name from class name."""
        name = cls.__name__
        if name.endswith("Tool"):
            name = name[:-4]
        # Convert to snake_case
        name = "".join(["_" + c.lower() if c.isupper() else c for c in name]).lstrip(
            "_"
        )
        return name

    def get_name(self) -> str:
        return self.get_name_from_cls()

    @abstractmethod
    def apply(self, **kwargs) -> str:
        """
        Apply the tool with the given arguments.

        Implementations return a JSON document as a string.
        """

    def get_apply_docstring(self) -> str:
        """Get the docstring for the apply method."""
        docstring = self.apply.__doc__
        if not docstring:
            raise AttributeError(f"apply method has no docstring in {self.__class__}.")
        return docstring.strip()

    def apply_ex(
        self, log_call: bool = True, catch_exceptions: bool = True, **kwargs
    ) -> str:
        """
        Apply the tool with logging and exception handling.

        Exceptions become a JSON ``{"error": ...}`` envelope so a failing tool
        never breaks transport-level delivery.
        """
        try:
            if log_call:
                logger.info("Calling %s with args: %s", self.get_name(), kwargs)

            result = self.apply(**kwargs)

            if log_call:
                logger.debug(
                    "Result: %s%s", result[:200], "..." if len(result) > 200 else ""
                )
            return result

        except Exception as e:
            if not catch_exceptions:
                raise

            logger.exception("Error executing tool %s", self.get_name())
            return json.dumps(
                {"error": f"Error executing tool {self.get_name()}: {e}"}, indent=2
            )
