from __future__ import annotations

import logging

import pytest

from pushstate.fingerprints import FileFingerprintStore


@pytest.fixture(autouse=True)
def _reset_pushstate_logging():
    yield
    # cli.main installs handlers bound to the captured stderr of one test
    logger = logging.getLogger("pushstate")
    for h in list(logger.handlers):
        logger.removeHandler(h)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def state_file(tmp_path):
    return str(tmp_path / "state" / "pushstate.json")


@pytest.fixture
def store(state_file):
    return FileFingerprintStore(state_file)

