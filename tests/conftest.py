# tests/conftest.py
import random

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def disable_file_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture
def rng() -> random.Random:
    """Детерминированный генератор."""
    return random.Random(42)
