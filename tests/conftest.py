"""
Shared pytest fixtures for the transpiler tests.

This module provides:
- A default transpiler instance
- A helper running a single rewrite stage over a snippet
"""

from typing import Callable, Type

import pytest

from zenoscript.transpiler import ZenoscriptTranspiler
from zenoscript.transpiler.zs_scanner import RewriteStage


@pytest.fixture
def transpiler() -> ZenoscriptTranspiler:
    """Transpiler with default options and the standard stages."""
    return ZenoscriptTranspiler()


@pytest.fixture
def run_stage() -> Callable[[Type[RewriteStage], str], str]:
    """Run one stage in isolation: ``run_stage(PipeRewriter, source)``."""
    def _run(stage_class: Type[RewriteStage], source: str) -> str:
        return stage_class().rewrite(source)
    return _run
