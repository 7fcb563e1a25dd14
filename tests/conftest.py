import os
import shlex
import subprocess
import sys

import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


def validator_command():
    """Command under test: $JSON_PARSER_EXECUTABLE if set, else the in-tree script."""
    exe = os.environ.get("JSON_PARSER_EXECUTABLE")
    if exe:
        return shlex.split(exe)
    return [sys.executable, os.path.join(REPO_ROOT, "json_parser.py")]


@pytest.fixture
def run_validator():
    """Run the validator with ``data`` on stdin; returns the CompletedProcess."""
    def _run(data: bytes, *args):
        return subprocess.run(
            validator_command() + list(args),
            input=data,
            capture_output=True,
            cwd=REPO_ROOT,
        )
    return _run


@pytest.fixture
def run_fixture(run_validator):
    """Feed the contents of a fixture file on stdin, as the step harnesses do."""
    def _run(path: str):
        with open(path, "rb") as fh:
            return run_validator(fh.read())
    return _run


def step_fixtures(step_dir, prefix):
    """Sorted paths of the ``<prefix>*.json`` fixtures in one step directory."""
    names = sorted(f for f in os.listdir(step_dir) if f.startswith(prefix) and f.endswith(".json"))
    return [os.path.join(step_dir, name) for name in names]


def pytest_generate_tests(metafunc):
    # Step harnesses ask for valid_file / invalid_file; each is parametrized
    # over the fixtures sitting next to the requesting module.
    for argname, prefix in (("valid_file", "valid"), ("invalid_file", "invalid")):
        if argname not in metafunc.fixturenames:
            continue
        step_dir = os.path.dirname(os.path.abspath(metafunc.module.__file__))
        paths = step_fixtures(step_dir, prefix)
        # Hard fail if test files are missing
        if not paths:
            raise RuntimeError(f"No {prefix}*.json files found in {os.path.basename(step_dir)} directory")
        metafunc.parametrize(argname, paths, ids=[os.path.basename(p) for p in paths])
