from __future__ import annotations

import io
from typing import Tuple

import pytest
from rich.console import Console

from saas_setup.logging import reset_logging


@pytest.fixture
def console_buf() -> Tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=200, color_system=None), buf


@pytest.fixture(autouse=True)
def _reset_logging():
    reset_logging()
    yield
    reset_logging()
