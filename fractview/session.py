from __future__ import annotations

import enum
import itertools
import threading
from dataclasses import dataclass, field
from typing import Optional

from fractview.color import ColorStyle
from fractview.escape import OVERFLOW, JuliaParameter
from fractview.target import RenderTarget
from fractview.viewport import SampleWindow, ViewTransform, sample_window

_session_ids = itertools.count(1)


class RenderState(enum.Enum):
    IDLE = "idle"
    SEEDING = "seeding"
    SWEEPING = "sweeping"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (RenderState.COMPLETED, RenderState.CANCELLED, RenderState.FAILED)


class CancellationToken:
    """Flag a caller sets from any thread; the sweep polls it between blocks."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def sleep(self, seconds: float) -> bool:
        """Wait up to ``seconds``; returns True when cancelled meanwhile."""
        return self._event.wait(seconds)


@dataclass
class RenderSession:
    target: RenderTarget
    window: SampleWindow
    style: ColorStyle = field(default_factory=ColorStyle)
    julia: Optional[JuliaParameter] = None
    start_delay: float = 0.0
    max_iterations: int = OVERFLOW
    token: CancellationToken = field(default_factory=CancellationToken)
    session_id: int = field(default_factory=lambda: next(_session_ids))
    state: RenderState = RenderState.IDLE
    block_size: int = 0

    @classmethod
    def create(
        cls,
        target: RenderTarget,
        transform: ViewTransform,
        *,
        style: Optional[ColorStyle] = None,
        julia: Optional[JuliaParameter] = None,
        start_delay: float = 0.0,
        max_iterations: int = OVERFLOW,
        token: Optional[CancellationToken] = None,
    ) -> "RenderSession":
        return cls(
            target=target,
            window=sample_window(transform, target.width, target.height),
            style=style or ColorStyle(),
            julia=julia,
            start_delay=start_delay,
            max_iterations=max_iterations,
            token=token or CancellationToken(),
        )

    def cancel(self) -> None:
        if not self.state.terminal:
            self.token.cancel()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled
