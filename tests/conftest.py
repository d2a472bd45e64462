import logging

import pytest

from fractview.color import ColorStyle
from fractview.renderers.progressive import run_session
from fractview.session import RenderSession
from fractview.target import RenderTarget
from fractview.viewport import ViewTransform


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger("fractview")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def render():
    """Run a progressive render synchronously; returns (target, session, events)."""

    def _render(width, height, transform=None, **kwargs):
        target = RenderTarget(width, height)
        session = RenderSession.create(target, transform or ViewTransform(), **kwargs)
        events = []
        run_session(session, events.append)
        return target, session, events

    return _render


@pytest.fixture
def pastel():
    return ColorStyle(saturation=0.5, brightness=0.5)
