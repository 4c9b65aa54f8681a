from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from rome_timeclock.main import create_app

# A Wednesday, so the current week already has Monday and Tuesday in it.
FIXED_NOW = datetime(2026, 3, 4, 9, 0, 0)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingEmail:
    """Stands in for EmailSender; remembers what would have been sent."""

    def __init__(self, *, fail_with: Exception | None = None):
        self.codes: list[dict] = []
        self.decisions: list[dict] = []
        self._fail_with = fail_with

    def send_verification_code(self, **kwargs) -> None:
        if self._fail_with:
            raise self._fail_with
        self.codes.append(kwargs)

    def send_time_off_decision(self, **kwargs) -> None:
        if self._fail_with:
            raise self._fail_with
        self.decisions.append(kwargs)


@pytest.fixture
def clock():
    return FakeClock(FIXED_NOW)


@pytest.fixture
def app(clock):
    return create_app("config.testing", clock=clock)


@pytest.fixture
def container(app):
    return app.extensions["rome_timeclock"]


@pytest.fixture
def client(app):
    return app.test_client()
