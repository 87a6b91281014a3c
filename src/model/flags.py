"""Compiled flag types shared by the compiler, shim and summarizer."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field

from model.isolation import IsolationState
from model.permission import PermissionRecord, PermKind


@dataclass(frozen=True)
class PermissionFlag:
    """One flag produced by one record.

    native flags are `distrobox create` options and go on the command line
    as-is; everything else is a container-engine option and is wrapped in
    `--additional-flags` by the invocation shim.
    """

    kind: PermKind
    tokens: tuple[str, ...]
    native: bool = False

    def as_text(self) -> str:
        return shlex.join(self.tokens)


@dataclass
class CompiledFlags:
    """Compiler output for one container."""

    unshare_flags: list[str] = field(default_factory=list)
    permission_flags: list[PermissionFlag] = field(default_factory=list)
    isolation: IsolationState = field(default_factory=IsolationState)
    # Records dropped because their value made no sense for their kind
    ignored: list[PermissionRecord] = field(default_factory=list)

    def flag_sequence(self) -> list[str]:
        """Unshare flags followed by the raw permission tokens."""
        args = list(self.unshare_flags)
        for flag in self.permission_flags:
            args.extend(flag.tokens)
        return args
