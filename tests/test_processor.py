"""
Unit tests for the metric evaluator and the exporter.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from dbh_height.nls import (
    METRIC_COLUMNS,
    MODEL_IDS,
    MeyerModel,
    WykoffModel,
    evaluate_models,
    export_metrics,
    fit_nls_models,
)


class TestFitNlsModels:
    """Test fit_nls_models function."""

    def test_results_in_fitting_order(self, observations):
        dbh, height = observations
        models = {"model9": MeyerModel(), "model3": WykoffModel()}
        results = fit_nls_models(dbh, height, models=models)
        assert list(results) == ["model9", "model3"]
        assert results["model9"] is models["model9"].fit_result

    def test_failure_does_not_stop_other_fits(self, observations):
        dbh, height = observations
        models = {"model3": WykoffModel(), "model9": MeyerModel(start=[0.0, 0.0])}
        results = fit_nls_models(dbh, height, models=models)
        assert results["model3"].convergence
        assert not results["model9"].convergence


class TestEvaluateModels:
    """Test evaluate_models function."""

    def test_one_row_per_converged_model(self, fitted_models, observations):
        dbh, height = observations
        metrics = evaluate_models(fitted_models, dbh, height)

        converged = [m for m in MODEL_IDS if fitted_models[m].fit_result.convergence]
        assert list(metrics.columns) == METRIC_COLUMNS
        assert list(metrics["Model"]) == converged

    def test_error_measures_non_negative(self, fitted_models, observations):
        dbh, height = observations
        metrics = evaluate_models(fitted_models, dbh, height)
        assert (metrics["RMSE"] >= 0).all()
        assert (metrics["MAE"] >= 0).all()
        assert (metrics["MAE"] <= metrics["RMSE"] + 1e-12).all()

    def test_metrics_match_fit_result(self, fitted_models, observations):
        dbh, height = observations
        metrics = evaluate_models(fitted_models, dbh, height).set_index("Model")
        result = fitted_models["model9"].fit_result
        assert metrics.loc["model9", "AIC"] == pytest.approx(result.aic)
        assert metrics.loc["model9", "RMSE"] == pytest.approx(result.rmse)
        assert metrics.loc["model9", "Mean_Bias"] == pytest.approx(result.bias)
        assert metrics.loc["model9", "MAE"] == pytest.approx(result.mae)

    def test_missing_slots_warn(self, observations, caplog):
        dbh, height = observations
        models = {"model9": MeyerModel(), "model3": WykoffModel()}
        fit_nls_models(dbh, height, models=models)

        with caplog.at_level(logging.WARNING, logger="dbh_height.nls.processor"):
            metrics = evaluate_models(models, dbh, height)

        assert list(metrics["Model"]) == ["model3", "model9"]
        missing = [r for r in caplog.records if "does not exist" in r.getMessage()]
        assert len(missing) == 8

    def test_unfitted_model_treated_as_missing(self, observations, caplog):
        dbh, height = observations
        with caplog.at_level(logging.WARNING, logger="dbh_height.nls.processor"):
            metrics = evaluate_models({"model9": MeyerModel()}, dbh, height, model_ids=["model9"])
        assert metrics.empty
        assert "does not exist" in caplog.text

    def test_failed_model_skipped(self, observations, caplog):
        dbh, height = observations
        models = {"model3": WykoffModel(), "model9": MeyerModel(start=[0.0, 0.0])}
        fit_nls_models(dbh, height, models=models)

        with caplog.at_level(logging.WARNING, logger="dbh_height.nls.processor"):
            metrics = evaluate_models(models, dbh, height, model_ids=["model3", "model9"])

        assert list(metrics["Model"]) == ["model3"]
        assert "did not converge" in caplog.text

    def test_empty_table_keeps_columns(self, observations):
        dbh, height = observations
        metrics = evaluate_models({}, dbh, height)
        assert metrics.empty
        assert list(metrics.columns) == METRIC_COLUMNS


class TestExportMetrics:
    """Test export_metrics function."""

    def test_header(self, fitted_models, observations, tmp_path):
        dbh, height = observations
        path = tmp_path / "model_metrics.csv"
        export_metrics(evaluate_models(fitted_models, dbh, height), str(path))
        assert path.read_text().splitlines()[0] == "Model,AIC,RMSE,Mean_Bias,MAE"

    def test_round_trip(self, fitted_models, observations, tmp_path):
        dbh, height = observations
        metrics = evaluate_models(fitted_models, dbh, height)
        path = tmp_path / "model_metrics.csv"
        export_metrics(metrics, str(path))

        loaded = pd.read_csv(path)
        assert list(loaded["Model"]) == list(metrics["Model"])
        for column in METRIC_COLUMNS[1:]:
            np.testing.assert_allclose(loaded[column], metrics[column], rtol=1e-12)

    def test_overwrites_existing_file(self, tmp_path):
        path = tmp_path / "model_metrics.csv"
        path.write_text("stale,content\n1,2\n3,4\n5,6\n")
        metrics = pd.DataFrame(
            [{"Model": "model9", "AIC": 1.5, "RMSE": 0.5, "Mean_Bias": -0.1, "MAE": 0.4}]
        )
        export_metrics(metrics, str(path))
        assert path.read_text().splitlines() == [
            "Model,AIC,RMSE,Mean_Bias,MAE",
            "model9,1.5,0.5,-0.1,0.4",
        ]

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "out" / "metrics.csv"
        export_metrics(pd.DataFrame(columns=METRIC_COLUMNS), str(path))
        assert path.exists()
        assert path.read_text().strip() == "Model,AIC,RMSE,Mean_Bias,MAE"
