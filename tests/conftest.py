from pathlib import Path

import pytest
import structlog

from citysearch.gazetteer import load_gazetteer
from citysearch.scoring import tuning

SAMPLE_CSV = Path(__file__).resolve().parents[1] / "data" / "cities_gb_sample.csv"


@pytest.fixture
def sample_csv_path():
    return SAMPLE_CSV


@pytest.fixture
def gazetteer():
    return load_gazetteer(SAMPLE_CSV)


@pytest.fixture(autouse=True)
def fresh_tuning_and_log_context():
    tuning.cache_clear()
    yield
    tuning.cache_clear()
    structlog.contextvars.clear_contextvars()
