"""Exception types raised by hook stages."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import HookReport


class HookError(RuntimeError):
    """Base class for hookrun failures."""


class FatalHookError(HookError):
    """Raised when a fatal category fails and the pipeline must halt.

    ``report`` is attached by the runner once the partial results are known so
    that callers can still emit whatever output earlier stages produced.
    """

    def __init__(
        self,
        message: str,
        *,
        category: str,
        output: str = "",
        exit_code: int = 1,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.output = output
        self.exit_code = exit_code
        self.report: HookReport | None = None
