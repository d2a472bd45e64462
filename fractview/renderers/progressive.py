"""Coarse-to-fine escape-time rendering.

A seed block covering the whole target is painted first, then each pass
splits every block of the previous pass in four and evaluates only the three
new quadrants. The top-left quadrant shares its origin with the parent block,
so it already carries the right colour.
Every block is evaluated at its own top-left pixel, which makes the final
1-pixel pass identical to evaluating each pixel directly.
"""

from __future__ import annotations

import time
from typing import Callable, Iterator, List, Optional, Tuple

from fractview.color import map_color
from fractview.escape import point_value
from fractview.events import Cancelled, Completed, Failed, FramePainted, RenderEvent, Started, is_terminal
from fractview.session import RenderSession, RenderState
from fractview.util.logging_setup import get_logger

Origins = List[Tuple[int, int]]
Listener = Callable[[RenderEvent], None]

logger = get_logger("progressive")


def initial_block_size(width: int, height: int) -> int:
    size_max = max(width, height)
    shifts = 0
    while (1 << shifts) < size_max:
        shifts += 1
    # A power of 2 no smaller than the target, so the seed block covers it all
    # and every pass can halve it down to single pixels.
    return 1 << shifts


def block_sizes(width: int, height: int) -> List[int]:
    sizes = []
    block = initial_block_size(width, height)
    while block >= 1:
        sizes.append(block)
        block >>= 1
    return sizes


def _refine_rows(width: int, height: int, parent: int) -> Iterator[Origins]:
    block = parent >> 1
    for y1 in range(0, height, parent):
        row = []
        for x1 in range(0, width, parent):
            for x, y in ((x1, y1 + block), (x1 + block, y1), (x1 + block, y1 + block)):
                if x < width and y < height:
                    row.append((x, y))
        yield row


def schedule(width: int, height: int) -> Iterator[Tuple[int, int, int, Origins]]:
    """Yield ``(block_size, row, rows, origins)`` for every row of every pass after the seed."""
    block = initial_block_size(width, height)
    # The seed block already covers the target, so the first pass has nothing new to paint.
    yield block, 0, 1, []

    parent = block
    while parent > 1:
        rows = -(-height // parent)
        for row, origins in enumerate(_refine_rows(width, height, parent)):
            yield parent >> 1, row, rows, origins
        parent >>= 1


def paint_block(session: RenderSession, x: int, y: int, size: int) -> None:
    re, im = session.window.point(x, y)
    value = point_value(re, im, session.julia, session.max_iterations)
    session.target.fill_rect(x, y, size, size, map_color(value, session.style))


def sweep(session: RenderSession) -> Iterator[RenderEvent]:
    """Render ``session`` into its target, yielding events as the picture refines.

    Cancellation is polled before every block. Once observed, the generator
    yields a single ``Cancelled`` and stops.
    """
    target = session.target
    token = session.token
    sid = session.session_id
    width, height = target.width, target.height
    block0 = initial_block_size(width, height)

    session.state = RenderState.SEEDING
    session.block_size = block0
    logger.info("Session %s start size=%sx%s block=%s julia=%s", sid, width, height, block0, session.julia)
    yield Started(session=sid, width=width, height=height, block_size=block0)

    if session.start_delay > 0:
        token.sleep(session.start_delay)
    if token.cancelled:
        session.state = RenderState.CANCELLED
        logger.info("Session %s cancelled before seeding", sid)
        yield Cancelled(session=sid)
        return

    time_start = time.perf_counter()
    target.clear()
    paint_block(session, 0, 0, block0)
    yield FramePainted(session=sid, block_size=block0, seed=True)

    session.state = RenderState.SWEEPING
    for block, row, rows, origins in schedule(width, height):
        if block != session.block_size:
            logger.debug("Session %s pass block=%s", sid, block)
        session.block_size = block
        for x, y in origins:
            if token.cancelled:
                break
            paint_block(session, x, y, block)
        if token.cancelled:
            session.state = RenderState.CANCELLED
            logger.info("Session %s cancelled at block=%s row=%s/%s", sid, block, row + 1, rows)
            yield Cancelled(session=sid)
            return
        yield FramePainted(session=sid, block_size=block, row=row, rows=rows)

    if token.cancelled:
        session.state = RenderState.CANCELLED
        logger.info("Session %s cancelled after the last pass", sid)
        yield Cancelled(session=sid)
        return

    session.state = RenderState.COMPLETED
    elapsed = time.perf_counter() - time_start
    yield FramePainted(session=sid, block_size=1, row=0, rows=1, final=True)
    logger.info("Session %s rendered in %.0fms", sid, elapsed * 1000.0)
    yield Completed(session=sid, elapsed=elapsed)


def _deliver(session: RenderSession, listener: Optional[Listener], event: RenderEvent) -> Optional[Exception]:
    if listener is None:
        return None
    try:
        listener(event)
    except Exception as e:
        logger.exception("Session %s listener failed on %s", session.session_id, type(event).__name__)
        return e
    return None


def run_session(session: RenderSession, listener: Optional[Listener] = None) -> RenderState:
    """Drive :func:`sweep` to its end on the calling thread.

    Exactly one terminal event reaches the listener. An exception from the
    sweep, or from the listener before the terminal event, stops the render
    and is published as ``Failed``. Listener errors on the terminal event
    itself are logged and leave the state alone.
    """
    events = sweep(session)
    failure: Optional[Exception] = None
    try:
        for event in events:
            error = _deliver(session, listener, event)
            if error is not None and not is_terminal(event):
                failure = error
                break
    except Exception as e:
        logger.exception("Session %s failed", session.session_id)
        failure = e
    finally:
        events.close()

    if failure is not None:
        session.state = RenderState.FAILED
        _deliver(session, listener, Failed(session=session.session_id, error=failure))
    return session.state
