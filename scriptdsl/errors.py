from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class DSLError(Exception):
    """Base exception for scriptdsl."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = dict(context) if context is not None else {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class InvalidConfiguration(DSLError, ValueError):
    """Raised when a function is defined with an unsupported option."""


class ArgumentCountError(DSLError, TypeError):
    """Raised when a function is invoked with the wrong number of arguments."""

    def __init__(self, name: str, given: int, expected: int, *, minimum: bool = False) -> None:
        bound = f"minimum {expected}" if minimum else str(expected)
        super().__init__(
            f"{name}(): Wrong number of arguments given ({given} for {bound})",
            context={"function": name, "given": given, "expected": expected, "minimum": minimum},
        )
        self.name = name
        self.given = given
        self.expected = expected
        self.minimum = minimum


class InvalidCallConvention(DSLError, TypeError):
    """Raised when a function is not called with a single list of arguments."""


class AutoloadError(DSLError, ImportError):
    """Raised when a function definition file fails while being loaded."""


class ScriptError(DSLError):
    """Raised while parsing or evaluating a script."""


class ScriptParseError(ScriptError, SyntaxError):
    """Raised when a script cannot be parsed."""


class UnknownFunctionError(ScriptError, NameError):
    """Raised when a script calls a function that cannot be resolved."""

    def __init__(self, name: str, environment: Optional[str] = None) -> None:
        super().__init__(
            f"Unknown function '{name}'",
            context={"function": name, "environment": environment},
        )
        self.name = name
