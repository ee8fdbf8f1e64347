"""Shared test fixtures for the x16remote test suite.

Provides a controllable millisecond clock, a recording injector stamped
by that clock, and schedulers/controllers wired to both.
"""

from __future__ import annotations

import pytest

from x16remote.injectors.recording import RecordingInjector
from x16remote.input.controller import InputController
from x16remote.input.scheduler import InputScheduler, SimulatedClock


@pytest.fixture
def clock() -> SimulatedClock:
    """A clock starting at t=0 that only moves when advanced."""
    return SimulatedClock()


@pytest.fixture
def recorder(clock: SimulatedClock) -> RecordingInjector:
    """An injector that records events with simulated timestamps."""
    return RecordingInjector(clock=clock)


@pytest.fixture
def scheduler(recorder: RecordingInjector, clock: SimulatedClock) -> InputScheduler:
    return InputScheduler(injector=recorder, clock=clock)


@pytest.fixture
def controller(recorder: RecordingInjector, clock: SimulatedClock) -> InputController:
    return InputController(injector=recorder, clock=clock)
