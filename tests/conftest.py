from __future__ import annotations

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from canonical_table import get_table
from evaluator import SevenCardEvaluator


@pytest.fixture(scope="session")
def table():
    # full 2,598,960-hand enumeration, built once per test session
    return get_table()


@pytest.fixture
def evaluator(table):
    return SevenCardEvaluator(table)
