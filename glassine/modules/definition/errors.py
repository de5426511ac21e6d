"""Errors raised while reading a definition document.

Every error aborts the parse. Line-scoped errors carry the 1-based
line where they were detected; document-level errors carry None.
"""
from __future__ import annotations


class DefinitionError(ValueError):
    """Base class for definition document errors."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line


class MissingArgumentError(DefinitionError):
    """A command token has no value after it."""

    def __init__(self, token: str, line: int) -> None:
        super().__init__(
            f"Expected value after <{token}> at line {line}", line,
        )
        self.token = token


class UnterminatedEscapeError(DefinitionError):
    """The document ends with an escape character."""

    def __init__(self, line: int) -> None:
        super().__init__(f"Invalid escaping on line {line}", line)


class UnknownCommandError(DefinitionError):
    """A token does not name any command type."""

    def __init__(self, token: str, line: int) -> None:
        super().__init__(f"Invalid command <{token}> on line {line}", line)
        self.token = token


class MissingOriginError(DefinitionError):
    def __init__(self) -> None:
        super().__init__("Input definition has no origin.")


class MultipleOriginError(DefinitionError):
    def __init__(self) -> None:
        super().__init__("Input definition has multiple origins.")


class MultipleEntrypointError(DefinitionError):
    def __init__(self) -> None:
        super().__init__("Input definition has multiple entrypoints.")
