"""Unit tests for ICF credential progress."""

import pytest
from services.members_service.services.credentials import (
    compute_progress,
    next_level_requirements,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "level, next_level, coaching, training",
    [
        (None, "ACC", 100, 60),
        ("none", "ACC", 100, 60),
        ("ACC", "PCC", 500, 125),
        ("PCC", "MCC", 2500, 200),
    ],
)
def test_ladder(level, next_level, coaching, training):
    requirements = next_level_requirements(level)
    assert requirements.level == next_level
    assert requirements.coaching_hours == coaching
    assert requirements.training_hours == training


@pytest.mark.unit
def test_mcc_has_no_next_level():
    assert next_level_requirements("MCC") is None
    progress = compute_progress("MCC", 3000, 20)
    assert progress.next_level is None
    assert progress.coaching_percent == 100.0
    assert progress.training_percent == 50.0
    assert not progress.ready


@pytest.mark.unit
def test_progress_percentages_are_capped():
    progress = compute_progress("none", 50, 120)
    assert progress.next_level == "ACC"
    assert progress.coaching_percent == 50.0
    assert progress.training_percent == 100.0
    assert not progress.ready


@pytest.mark.unit
def test_ready_when_both_requirements_met():
    progress = compute_progress("ACC", 520.4, 130)
    assert progress.ready
    assert progress.coaching_hours == 520.4
