"""Lifecycle and frame events published by a render session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Started:
    session: int
    width: int
    height: int
    block_size: int


@dataclass(frozen=True)
class FramePainted:
    """The target holds a newer partial (or final) picture.

    ``block_size`` is the edge length of the blocks painted during the pass;
    ``row``/``rows`` locate the swept row within that pass.
    """

    session: int
    block_size: int
    row: int = 0
    rows: int = 1
    seed: bool = False
    final: bool = False


@dataclass(frozen=True)
class Completed:
    session: int
    elapsed: float


@dataclass(frozen=True)
class Cancelled:
    session: int


@dataclass(frozen=True)
class Failed:
    session: int
    error: BaseException


RenderEvent = Union[Started, FramePainted, Completed, Cancelled, Failed]

TERMINAL_EVENTS = (Completed, Cancelled, Failed)


def is_terminal(event: RenderEvent) -> bool:
    return isinstance(event, TERMINAL_EVENTS)
