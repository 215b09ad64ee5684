"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from wml.adaptive.models import ChangeDirection, Difficulty, PerformanceHistory  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def fresh_history():
    """Neutral record for a learner with no quizzes."""
    return PerformanceHistory.default()


@pytest.fixture
def rising_history():
    """Four lessons in, scores climbing, still at beginner."""
    return PerformanceHistory(
        total_lessons_completed=4,
        recent_quiz_scores=(60, 65, 70, 90),
        average_quiz_score=71.25,
        current_difficulty=Difficulty.BEGINNER,
        last_difficulty_change_direction=ChangeDirection.STABLE,
    )


@pytest.fixture
def engaged_context():
    return {"currentStreak": 4, "completionRatio": 0.5}


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same UTC instant."""
    instant = datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)
    return lambda: instant
