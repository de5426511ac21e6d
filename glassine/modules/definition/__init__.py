"""Definition document front end: command types, commands, parser."""
from glassine.modules.definition.command import Command
from glassine.modules.definition.command_type import (
    COMMAND_TOKENS,
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
from glassine.modules.definition.parser import parse, parse_definition

__all__ = [
    "COMMAND_TOKENS",
    "Command",
    "CommandType",
    "DefinitionError",
    "MissingArgumentError",
    "MissingOriginError",
    "MultipleEntrypointError",
    "MultipleOriginError",
    "UnknownCommandError",
    "UnterminatedEscapeError",
    "parse",
    "parse_definition",
    "resolve_token",
]
