"""Pytest configuration for sdfview tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Fast math stays off
    so the slab test sees IEEE infinities.
    """
    ti.init(arch=ti.cpu, fast_math=False)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def render_context():
    """A small render context cleared to the default gray."""
    from sdfview.render.context import RenderContext

    return RenderContext(16, 16)
