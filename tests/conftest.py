# SPDX-License-Identifier: Apache-2.0
"""
Shared pytest fixtures:
- Clean VECPACK_* environment per test so config/CLI tests are hermetic
- Reset logging context and the `vecpack` logger between tests
"""
from __future__ import annotations

import logging
import os
from typing import Iterator

import pytest

from vecpack import logging as vlog


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in list(os.environ):
        if key.startswith("VECPACK_"):
            monkeypatch.delenv(key, raising=False)
    yield
    vlog.clear_context()
    root = logging.getLogger("vecpack")
    for h in list(root.handlers):
        root.removeHandler(h)
    root.propagate = True
    root.setLevel(logging.NOTSET)
