"""Pytest configuration and shared fixtures."""

import random

import pytest
from loguru import logger

from neatdrive.run.config import Config


@pytest.fixture
def config():
    """Default configuration, shrunk to 2 inputs, 2 outputs and 10 genomes."""
    config = Config()
    config.num_inputs      = 2
    config.num_outputs     = 2
    config.population_size = 10
    return config


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def log_records():
    """Capture the loguru records emitted during a test."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
