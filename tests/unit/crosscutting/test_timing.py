"""Timer tests."""

import pytest

from bigo_api.crosscutting.timing import Timer

pytestmark = pytest.mark.unit


def test_unstarted_timer_reports_zero():
    assert Timer().elapsed_ms == 0.0


def test_stop_before_start_raises():
    with pytest.raises(RuntimeError, match="Timer not started"):
        Timer().stop()


def test_context_manager_measures_elapsed():
    with Timer() as timer:
        pass

    assert timer.elapsed_ms >= 0.0
    stopped = timer.elapsed_ms
    assert timer.elapsed_ms == stopped
