from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import sys
import threading

import pytest

from evented.config import reset_config

logger = logging.getLogger(__name__)


# Use a fixture to temporarily add the parent directory to sys.path for tests
@pytest.fixture(autouse=True, scope="session")
def add_parent_to_syspath():
    parent_dir = str(Path(__file__).resolve().parent.parent)
    sys.path.insert(0, parent_dir)
    yield
    try:
        sys.path.remove(parent_dir)
    except ValueError:
        pass


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts and ends with the default process-wide configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def background_event_loop():
    """An event loop running forever on its own thread, stopped and closed on teardown."""
    loop = asyncio.new_event_loop()
    started = threading.Event()

    def run() -> None:
        asyncio.set_event_loop(loop)
        loop.call_soon(started.set)
        loop.run_forever()

    thread = threading.Thread(target=run, name="evented-test-loop", daemon=True)
    thread.start()
    assert started.wait(timeout=5.0), "background event loop did not start"

    yield loop

    loop.call_soon_threadsafe(loop.stop)
    thread.join(timeout=5.0)
    if thread.is_alive():
        logger.error("Background event loop thread did not stop")
    else:
        loop.close()
