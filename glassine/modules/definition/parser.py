"""Definition document parser.

Reads a definition document in a single pass and returns the ordered
list of commands it declares. The grammar is line based:

- a line holds a command token, one or more spaces, and a value
- ``#`` starts a comment that runs to the end of the physical line
- ``\\`` takes the next character literally; an escaped newline
  continues the value on the next physical line
- blank lines and comment-only lines are ignored

Only spaces separate tokens from values; tabs are ordinary characters.
"""
from __future__ import annotations

from returns.result import Failure, Result, Success

from glassine.modules.definition.command import Command, trim_value
from glassine.modules.definition.command_type import (
    CommandType,
    resolve_token,
)
from glassine.modules.definition.errors import (
    DefinitionError,
    MissingArgumentError,
    MissingOriginError,
    MultipleEntrypointError,
    MultipleOriginError,
    UnknownCommandError,
    UnterminatedEscapeError,
)
from glassine.modules.errors import PipelineError

_SPACE = " "
_NEWLINE = "\n"
_COMMENT = "#"
_ESCAPE = "\\"


class _Scanner:
    """Cursor over one document. Created per parse, never shared."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.cursor = 0
        self.line = 1

    def at_end(self) -> bool:
        return self.cursor >= len(self.text)

    def peek(self) -> str:
        """Current character, or empty string at end of input."""
        if self.at_end():
            return ""
        return self.text[self.cursor]

    def skip_spaces(self) -> None:
        while self.peek() == _SPACE:
            self.cursor += 1

    def skip_to_newline(self) -> None:
        """Discard the rest of the physical line, leaving the newline."""
        while not self.at_end() and self.peek() != _NEWLINE:
            self.cursor += 1

    def read_token(self) -> tuple[str, bool]:
        """Read the leading word of a line.

        Returns (token, is_comment). A comment ends the token early and
        consumes the rest of the physical line.
        """
        token = ""
        while not self.at_end() and self.peek() != _SPACE:
            char = self.peek()
            if char == _COMMENT:
                self.skip_to_newline()
                return token, True
            if char == _NEWLINE:
                raise MissingArgumentError(token, self.line)
            token += char
            self.cursor += 1
        return token, False

    def read_argument(self, token: str) -> str:
        """Read a command value up to the next unescaped newline."""
        self.skip_spaces()
        if self.at_end() or self.peek() == _NEWLINE:
            raise MissingArgumentError(token, self.line)

        chars: list[str] = []
        while not self.at_end() and self.peek() != _NEWLINE:
            char = self.peek()
            if char == _COMMENT:
                self.skip_to_newline()
                break
            if char == _ESCAPE:
                if self.cursor == len(self.text) - 1:
                    raise UnterminatedEscapeError(self.line)
                self.cursor += 1
                char = self.peek()
                self.cursor += 1
                if char == _NEWLINE:
                    # Line continuation joins the two physical lines.
                    self.line += 1
                else:
                    chars.append(char)
                continue
            chars.append(char)
            self.cursor += 1
        return "".join(chars)


def _validate_document(commands: list[Command]) -> None:
    """Check document-level invariants of a non-empty command list."""
    if not commands:
        return
    if commands[0].kind is not CommandType.ORIGIN:
        raise MissingOriginError
    kinds = [command.kind for command in commands]
    if kinds.count(CommandType.ORIGIN) > 1:
        raise MultipleOriginError
    if kinds.count(CommandType.ENTRYPOINT) > 1:
        raise MultipleEntrypointError


def parse(text: str) -> list[Command]:
    """Parse a definition document into its ordered commands.

    Returns an empty list for a document with only blank and comment
    lines. Raises a DefinitionError subclass on the first problem.
    """
    scanner = _Scanner(text)
    result: list[Command] = []

    while not scanner.at_end():
        scanner.skip_spaces()
        if scanner.peek() == _NEWLINE:
            scanner.line += 1
            scanner.cursor += 1
            continue
        if scanner.at_end():
            break

        token, is_comment = scanner.read_token()
        argument = "" if is_comment else scanner.read_argument(token)
        argument = trim_value(argument)

        if not token:
            continue
        if not argument:
            raise MissingArgumentError(token, scanner.line)
        kind = resolve_token(token)
        if kind is None:
            raise UnknownCommandError(token, scanner.line)
        result.append(Command(kind, argument))

    _validate_document(result)
    return result


def parse_definition(
    text: str,
) -> Result[list[Command], PipelineError]:
    """Parse a definition document (pure function).

    Returns Success(commands) or Failure(PipelineError) whose
    error_type names the DefinitionError subclass.
    """
    try:
        return Success(parse(text))
    except DefinitionError as exc:
        return Failure(
            PipelineError(
                step_name="parse_definition",
                error_type=type(exc).__name__,
                message=exc.message,
                line=exc.line,
            ),
        )
