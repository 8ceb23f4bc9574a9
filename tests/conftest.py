"""Shared pytest fixtures for the srcmgr test suite."""

from __future__ import annotations

import pytest

from srcmgr.buffers import BufferRegistry
from srcmgr.manager import SourceManager


@pytest.fixture
def registry():
    return BufferRegistry()


@pytest.fixture
def manager():
    return SourceManager()
