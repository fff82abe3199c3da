import sys
from pathlib import Path

import matplotlib
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

matplotlib.use("Agg")

from dbh_height.config import SampleConfig
from dbh_height.sample import generate_sample, unpack_sample
from dbh_height.nls import default_models, fit_nls_models


@pytest.fixture(scope="session")
def sample():
    return generate_sample(SampleConfig())


@pytest.fixture(scope="session")
def observations(sample):
    return unpack_sample(sample)


@pytest.fixture(scope="session")
def fitted_models(observations):
    """The ten default models fitted once to the default sample."""
    dbh, height = observations
    models = default_models()
    fit_nls_models(dbh, height, models=models)
    return models
