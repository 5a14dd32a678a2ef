from __future__ import annotations

import sys
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_ROOT))

from calcviz.expression import compile_expression  # noqa: E402


class FakeRenderer:
    """Records every draw; optionally fails."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self.calls: list = []
        self.fail_with = fail_with

    def draw(self, container_id, figure) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append((container_id, figure))

    @property
    def container_ids(self) -> list:
        return [cid for cid, _ in self.calls]


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture(scope="session")
def paraboloid():
    return compile_expression("x^2 + y^2")


@pytest.fixture(scope="session")
def saddle_xy():
    return compile_expression("x*y")
