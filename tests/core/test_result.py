"""
Tests for the Result[P] envelope.
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pysimstudy.core.result import Result


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


class TestResult:

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=42.0),
            info={"n": 20},
            timing={"total_seconds": 0.01},
            backend_name="cpu_loop",
        )
        assert result.params.value == 42.0
        assert result.info["n"] == 20
        assert result.backend_name == "cpu_loop"
        assert result.warnings == ()

    def test_frozen(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="cpu")
        with pytest.raises(FrozenInstanceError):
            result.backend_name = "other"

    def test_has_warning(self):
        result = Result(
            params=FakeParams(1.0),
            info={},
            timing=None,
            backend_name="cpu",
            warnings=("(B + 1) * alpha = 10.05 is not an integer",),
        )
        assert result.has_warning("not an integer")
        assert not result.has_warning("singular")
