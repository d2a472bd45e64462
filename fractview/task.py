"""Background rendering with a start/stop/restart lifecycle.

A :class:`FractalTask` owns one render target and runs at most one
:class:`~fractview.session.RenderSession` on it at a time, on a worker thread.
Events go to a queue (and to an optional listener called on the worker
thread), tagged with the session id so stale events can be told apart.
"""

from __future__ import annotations

import queue
import threading
from typing import Callable, Iterator, Optional

from fractview.color import ColorStyle
from fractview.escape import JuliaParameter
from fractview.events import RenderEvent, is_terminal
from fractview.renderers.progressive import run_session
from fractview.session import RenderSession
from fractview.target import RenderTarget
from fractview.util.logging_setup import get_logger
from fractview.viewport import ViewTransform

logger = get_logger("task")


class FractalTask:

    def __init__(
        self,
        target: RenderTarget,
        *,
        transform: Optional[ViewTransform] = None,
        style: Optional[ColorStyle] = None,
        julia: Optional[JuliaParameter] = None,
        listener: Optional[Callable[[RenderEvent], None]] = None,
        events: Optional["queue.Queue[RenderEvent]"] = None,
    ) -> None:
        self.target = target
        self.transform = transform or ViewTransform()
        # Live style; each session renders with the value it had at start().
        self.style = style or ColorStyle()
        self.julia = julia
        self.events: "queue.Queue[RenderEvent]" = events if events is not None else queue.Queue()
        self._listener = listener
        self._lock = threading.Lock()
        self._session: Optional[RenderSession] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def session(self) -> Optional[RenderSession]:
        return self._session

    def is_idle(self) -> bool:
        thread = self._thread
        return thread is None or not thread.is_alive()

    def start(self, delay: float = 0.0) -> Optional[RenderSession]:
        """Start rendering the current transform unless a session is already busy."""
        with self._lock:
            if not self.is_idle():
                logger.debug("Start ignored, session %s still running", self._session.session_id)
                return None
            session = RenderSession.create(
                self.target,
                self.transform,
                style=self.style,
                julia=self.julia,
                start_delay=delay,
            )
            thread = threading.Thread(target=self._run, args=(session,), name=f"fractal-{session.session_id}", daemon=True)
            self._session = session
            self._thread = thread
            thread.start()
            return session

    def stop(self, *, wait: bool = False, timeout: Optional[float] = None) -> None:
        session = self._session
        if session is not None:
            session.cancel()
        if wait:
            self.join(timeout)

    cancel = stop

    def restart(self, delay: float = 0.0) -> Optional[RenderSession]:
        self.stop(wait=True)
        return self.start(delay)

    def clear(self) -> None:
        self.transform = ViewTransform()

    def pan(self, dx: float, dy: float) -> None:
        self.transform = self.transform.translated(dx, dy)

    def zoom(self, factor: float) -> None:
        self.transform = self.transform.zoomed(factor)

    def join(self, timeout: Optional[float] = None) -> bool:
        thread = self._thread
        if thread is None or thread is threading.current_thread():
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def iter_events(self, timeout: Optional[float] = None) -> Iterator[RenderEvent]:
        """Drain the queue until the current session's terminal event.

        Raises ``queue.Empty`` when nothing arrives within ``timeout`` seconds.
        """
        session = self._session
        while True:
            event = self.events.get(timeout=timeout)
            yield event
            if is_terminal(event) and (session is None or event.session == session.session_id):
                return

    def _run(self, session: RenderSession) -> None:
        run_session(session, self._publish)

    def _publish(self, event: RenderEvent) -> None:
        self.events.put(event)
        if self._listener is not None:
            self._listener(event)
