"""Instruction kinds recognized in a definition document."""
from __future__ import annotations

from types import MappingProxyType

from glassine.modules.enumeration import ClosedEnum


class CommandType(ClosedEnum):
    """The different types of commands a definition can contain.

    Each variant carries the tokens that select it. Tokens are matched
    exactly and case-sensitively.
    """

    # Base image the definition builds on.
    ORIGIN = ("FROM",)
    # Command run inside the guest.
    RUN = ("RUN", "EXEC")
    # Locations copied into the guest filesystem.
    COPY = ("COPY",)
    # Working directory for the commands that follow.
    WORKDIR = ("WORKDIR",)
    # Boot command of the produced image.
    ENTRYPOINT = ("ENTRYPOINT", "CMD")

    def __init__(self, token: str, *tokens: str) -> None:
        self._tokens = (token, *tokens)

    @property
    def tokens(self) -> tuple[str, ...]:
        return self._tokens


def _build_token_table() -> MappingProxyType[str, CommandType]:
    table: dict[str, CommandType] = {}
    for kind in CommandType.all_variants():
        for token in kind.tokens:
            table.setdefault(token, kind)
    return MappingProxyType(table)


COMMAND_TOKENS: MappingProxyType[str, CommandType] = _build_token_table()


def resolve_token(token: str) -> CommandType | None:
    """Look up the command type for a token. Returns None if not found."""
    return COMMAND_TOKENS.get(token)
