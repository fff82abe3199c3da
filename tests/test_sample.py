"""
Unit tests for the synthetic sample and configuration.
"""

import json

import numpy as np
import pandas as pd
import pytest
from pydantic import ValidationError

from dbh_height.config import AnalysisConfig, SampleConfig, load_config
from dbh_height.sample import generate_sample, unpack_sample


class TestGenerateSample:
    """Test generate_sample function."""

    def test_default_shape_and_columns(self, sample):
        assert list(sample.columns) == ["DBH", "Height"]
        assert len(sample) == 120

    def test_reproducible(self):
        first = generate_sample(SampleConfig(seed=7))
        second = generate_sample(SampleConfig(seed=7))
        pd.testing.assert_frame_equal(first, second)

    def test_seed_changes_draw(self):
        first = generate_sample(SampleConfig(seed=1))
        second = generate_sample(SampleConfig(seed=2))
        assert not np.allclose(first["DBH"], second["DBH"])

    def test_height_is_affine_in_dbh(self, sample):
        dbh = sample["DBH"].to_numpy()
        height = sample["Height"].to_numpy()
        expected = 10 + dbh / dbh.max() * 15
        np.testing.assert_allclose(height, expected)

    def test_ranges(self, sample):
        assert sample["DBH"].min() > 0
        assert sample["DBH"].max() < 120
        assert sample["Height"].min() >= 10
        assert sample["Height"].max() == pytest.approx(25.0)

    def test_custom_ranges(self):
        config = SampleConfig(n_samples=30, dbh_min=5, dbh_max=50, height_min=2, height_max=8)
        data = generate_sample(config)
        assert len(data) == 30
        assert data["DBH"].between(5, 50).all()
        assert data["Height"].max() == pytest.approx(8.0)


class TestUnpackSample:
    """Test unpack_sample validation."""

    def test_returns_arrays(self, sample):
        dbh, height = unpack_sample(sample)
        assert dbh.shape == height.shape == (120,)

    def test_missing_column(self):
        with pytest.raises(ValueError, match="Height"):
            unpack_sample(pd.DataFrame({"DBH": [1.0, 2.0]}))

    def test_non_positive_values(self):
        with pytest.raises(ValueError, match="positive"):
            unpack_sample(pd.DataFrame({"DBH": [0.0, 2.0], "Height": [1.5, 2.0]}))


class TestConfig:
    """Test configuration models."""

    def test_defaults(self):
        config = AnalysisConfig()
        assert config.metrics_file == "model_metrics.csv"
        assert config.sample.seed == 123
        assert config.fit.method == "lm"
        assert config.starts == {}

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            SampleConfig(height_min=30, height_max=25)

    def test_non_positive_sample_size_rejected(self):
        with pytest.raises(ValidationError):
            SampleConfig(n_samples=0)

    def test_load_config(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({
            "output_dir": str(tmp_path / "out"),
            "sample": {"seed": 42},
            "starts": {"model9": [30.0, 0.03]},
        }))
        config = load_config(str(path))
        assert config.sample.seed == 42
        assert config.sample.n_samples == 120
        assert config.starts["model9"] == [30.0, 0.03]
