import os

import pytest

TESTS_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
STEP_DIRS = sorted(d for d in os.listdir(TESTS_DIR) if d.startswith("step"))


def test_steps_one_through_six_exist():
    assert STEP_DIRS == [f"step{n}" for n in range(1, 7)]


@pytest.mark.parametrize("step", STEP_DIRS)
def test_each_step_has_harness_and_both_fixture_kinds(step):
    names = os.listdir(os.path.join(TESTS_DIR, step))
    assert f"test_{step}_harness.py" in names
    assert any(n.startswith("valid") and n.endswith(".json") for n in names)
    assert any(n.startswith("invalid") and n.endswith(".json") for n in names)
