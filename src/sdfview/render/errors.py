"""Exceptions raised while building shading programs."""

from __future__ import annotations


class ProgramError(RuntimeError):
    """Base class for program build failures.

    A program that fails to build leaves nothing to render with, so these
    errors are meant to abort startup.
    """


class ShaderCompileError(ProgramError):
    """A vertex or fragment stage could not be compiled into a kernel.

    Attributes:
        stage: ``"vertex"`` or ``"fragment"``.
        diagnostic: The compiler's error text.
        source: Source code of the offending stage.
    """

    def __init__(self, program: str, stage: str, diagnostic: str, source: str) -> None:
        self.program = program
        self.stage = stage
        self.diagnostic = diagnostic
        self.source = source
        super().__init__(
            f"Failed to compile {stage} stage of program '{program}':\n"
            f"{diagnostic}\n{source}"
        )


class ProgramLinkError(ProgramError):
    """The stages of a program cannot be joined into a working program."""
