"""Tests for the cross-validated elastic-net models."""
import numpy as np
import pandas as pd
import pytest

from regsea.config import Family, Metric
from regsea.models.families import (
    LinearElasticNet,
    LogisticElasticNet,
    build_model,
)


class TestBuildModel:
    """Tests for family dispatch."""

    def test_gaussian(self):
        model = build_model("gaussian", alpha=0.3)
        assert isinstance(model, LinearElasticNet)
        assert model.alpha == 0.3

    def test_binomial(self):
        assert isinstance(build_model(Family.BINOMIAL), LogisticElasticNet)

    def test_unknown(self):
        with pytest.raises(ValueError):
            build_model("poisson")


class TestLinearElasticNet:
    """Tests for the gaussian family."""

    @pytest.fixture
    def fitted(self, toy_design):
        X, y = toy_design
        return LinearElasticNet(alpha=0.5, n_folds=5, seed=1, n_lambdas=30).fit(X, y)

    def test_lambda_grid_decreasing(self, fitted):
        assert len(fitted.lambdas_) == 30
        assert np.all(np.diff(fitted.lambdas_) < 0)
        assert fitted.lambdas_[-1] == pytest.approx(fitted.lambdas_[0] * 1e-3)

    def test_largest_lambda_selects_nothing(self, fitted):
        """At lambda_max every coefficient should be zero."""
        assert np.allclose(fitted.coef_path_.iloc[:, 0], 0.0)

    def test_lambda_choice(self, fitted):
        assert fitted.lambda_1se_ >= fitted.lambda_min_
        assert fitted.lambda_min_ in fitted.lambdas_
        assert fitted.metric_ is Metric.MSE

    def test_signal_columns_selected(self, fitted):
        selected = fitted.selected_features("min")
        assert "PATHWAY_0" in selected
        assert "PATHWAY_1" in selected
        assert fitted.coef("min")["PATHWAY_0"] > 0

    def test_1se_is_sparser(self, fitted):
        assert len(fitted.selected_features("1se")) <= len(fitted.selected_features("min"))

    def test_cv_results(self, fitted):
        cv = fitted.cv_results()
        assert list(cv.columns) == ["lambda", "cv_mean", "cv_se", "n_nonzero"]
        assert len(cv) == 30
        assert (cv["cv_se"] >= 0).all()
        assert fitted.fold_scores_.shape == (5, 30)

    def test_reproducible(self, toy_design):
        """Same seed should give identical coefficients."""
        X, y = toy_design
        a = LinearElasticNet(n_folds=5, seed=3, n_lambdas=20).fit(X, y)
        b = LinearElasticNet(n_folds=5, seed=3, n_lambdas=20).fit(X, y)
        assert a.lambda_min_ == b.lambda_min_
        pd.testing.assert_series_equal(a.coef(), b.coef())

    def test_predict_matches_decision_function(self, fitted, toy_design):
        X, _ = toy_design
        np.testing.assert_allclose(fitted.predict(X), fitted.decision_function(X))

    def test_coefficients_on_original_scale(self, fitted, toy_design):
        """Intercept plus coefficients should reproduce the linear predictor."""
        X, _ = toy_design
        eta = X.to_numpy(dtype=float) @ fitted.coef().to_numpy() + fitted.intercept()
        np.testing.assert_allclose(fitted.decision_function(X), eta)

    def test_summary(self, fitted):
        summary = fitted.summary()
        assert summary["family"] == "gaussian"
        assert summary["n_lambdas"] == 30
        assert summary["n_selected_1se"] <= summary["n_selected_min"]

    def test_mae_metric(self, toy_design):
        X, y = toy_design
        model = LinearElasticNet(n_folds=5, metric="mae", n_lambdas=10).fit(X, y)
        assert model.metric_ is Metric.MAE

    def test_numpy_input(self, toy_design):
        X, y = toy_design
        model = LinearElasticNet(n_folds=5, n_lambdas=10).fit(X.to_numpy(), y.to_numpy())
        assert model.feature_names_[0] == "feature_0"


class TestLogisticElasticNet:
    """Tests for the binomial family."""

    @pytest.fixture
    def fitted(self, toy_design):
        X, y = toy_design
        return LogisticElasticNet(alpha=0.5, n_folds=3, seed=1, n_lambdas=10,
                                  lambda_min_ratio=0.01, max_iter=2000).fit(X, y)

    def test_probabilities(self, fitted, toy_design):
        X, _ = toy_design
        probabilities = fitted.predict(X)
        assert np.all((probabilities >= 0) & (probabilities <= 1))

    def test_default_metric(self, fitted):
        assert fitted.metric_ is Metric.DEVIANCE
        assert fitted.lambda_1se_ >= fitted.lambda_min_

    def test_selected_names_subset(self, fitted, toy_design):
        X, _ = toy_design
        assert set(fitted.selected_features()) <= set(X.columns)

    def test_auc_metric(self, toy_design):
        X, y = toy_design
        model = LogisticElasticNet(n_folds=3, metric="auc", n_lambdas=5,
                                   lambda_min_ratio=0.05, max_iter=2000).fit(X, y)
        assert model.metric_ is Metric.AUC
        assert np.nanmax(model.cv_mean_) <= 1.0


class TestValidation:
    """Tests for input validation."""

    def test_unfitted(self):
        model = LinearElasticNet()
        with pytest.raises(ValueError, match="not fitted"):
            model.coef()

    def test_single_class_response(self, toy_design):
        X, _ = toy_design
        with pytest.raises(ValueError, match="both 0 and 1"):
            LinearElasticNet(n_folds=5).fit(X, np.zeros(len(X)))

    def test_length_mismatch(self, toy_design):
        X, y = toy_design
        with pytest.raises(ValueError, match="rows"):
            LinearElasticNet(n_folds=5).fit(X, y.iloc[:-1])

    def test_metric_not_allowed(self, toy_design):
        X, y = toy_design
        with pytest.raises(ValueError, match="not available"):
            LinearElasticNet(n_folds=5, metric="class").fit(X, y)

    def test_bad_which(self, toy_design):
        X, y = toy_design
        model = LinearElasticNet(n_folds=5, n_lambdas=10).fit(X, y)
        with pytest.raises(ValueError):
            model.coef("best")


class TestLambdaChoice:
    """Tests for choosing lambda_min and lambda_1se from the CV curve."""

    @staticmethod
    def _model_with_curve(cv_mean, cv_se, metric):
        model = LinearElasticNet()
        model.metric_ = metric
        model.lambdas_ = np.array([1.0, 0.5, 0.25, 0.125])
        model.cv_mean_ = np.asarray(cv_mean, dtype=float)
        model.cv_se_ = np.asarray(cv_se, dtype=float)
        return model

    def test_one_se_rule(self):
        model = self._model_with_curve([0.30, 0.22, 0.20, 0.21],
                                       [0.01, 0.01, 0.03, 0.01], Metric.MSE)
        lambda_min, lambda_1se = model._choose_lambdas()
        assert lambda_min == 0.25
        assert lambda_1se == 0.5

    def test_nan_standard_error(self):
        """A best lambda without a standard error keeps lambda_1se at lambda_min."""
        model = self._model_with_curve([0.5, 0.6, 0.8, 0.7],
                                       [np.nan, np.nan, np.nan, np.nan], Metric.AUC)
        lambda_min, lambda_1se = model._choose_lambdas()
        assert lambda_min == 0.25
        assert lambda_1se == lambda_min


class TestClassBalance:
    """The binomial family needs each class in every training fold."""

    def test_single_positive_binomial(self):
        rng = np.random.default_rng(1)
        X = pd.DataFrame(rng.binomial(1, 0.3, size=(60, 4)),
                         columns=[f"SET_{j}" for j in range(4)])
        y = np.zeros(60, dtype=int)
        y[0] = 1
        X.iloc[0] = 1
        with pytest.raises(ValueError, match="each class"):
            LogisticElasticNet(n_folds=3).fit(X, y)

    def test_single_positive_gaussian(self):
        """The gaussian family still fits a response with one positive."""
        rng = np.random.default_rng(1)
        X = pd.DataFrame(rng.binomial(1, 0.3, size=(60, 4)),
                         columns=[f"SET_{j}" for j in range(4)])
        y = np.zeros(60, dtype=int)
        y[0] = 1
        X.iloc[0] = 1
        model = LinearElasticNet(n_folds=3, n_lambdas=10).fit(X, y)
        assert model.lambda_1se_ >= model.lambda_min_
