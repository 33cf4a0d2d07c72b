from __future__ import annotations

import pytest

from preference_store import PreferenceStore
from task_generator import load_config


@pytest.fixture
def cfg():
    return load_config("ship_cleaning")


@pytest.fixture
def store(cfg) -> PreferenceStore:
    return PreferenceStore(cfg)
