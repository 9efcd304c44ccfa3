"""Tests for tidy coefficient and model summary extraction"""

import numpy as np
import pytest

from groupfit.engine.fitter import INTERCEPT_TERM, fit_group
from groupfit.engine.grouper import group_dataset
from groupfit.engine.tidy import COEFFICIENT_COLUMNS, coefficients_frame, glance, tidy

KEYS = ("country", "continent")


@pytest.fixture
def fitted_models(gapminder_df):
    return [fit_group(g.rows(gapminder_df), g.key) for g in group_dataset(gapminder_df)]


class TestTidy:
    """Test per-term records"""

    def test_intercept_then_slope(self, fitted_models):
        records = tidy(fitted_models[0], KEYS)
        assert [r.term for r in records] == [INTERCEPT_TERM, "year"]
        assert all(r.country == "Argentina" and r.continent == "Americas" for r in records)

    def test_matches_statsmodels_conf_int(self, fitted_models):
        for fitted in fitted_models:
            records = tidy(fitted, KEYS, conf_level=0.95)
            ci = fitted.results.conf_int(alpha=0.05).to_numpy()
            np.testing.assert_allclose([r.conf_low for r in records], ci[:, 0], rtol=1e-12)
            np.testing.assert_allclose([r.conf_high for r in records], ci[:, 1], rtol=1e-12)

    def test_full_precision(self, fitted_models):
        fitted = fitted_models[0]
        slope = tidy(fitted, KEYS)[1]
        assert slope.estimate == float(fitted.results.params["year"])
        assert slope.std_error == float(fitted.results.bse["year"])
        assert slope.statistic == float(fitted.results.tvalues["year"])
        assert slope.p_value == float(fitted.results.pvalues["year"])

    def test_interval_contains_estimate(self, fitted_models):
        for fitted in fitted_models:
            for r in tidy(fitted, KEYS):
                assert r.conf_low <= r.estimate <= r.conf_high

    def test_wider_interval_at_higher_level(self, fitted_models):
        narrow = tidy(fitted_models[0], KEYS, conf_level=0.90)[1]
        wide = tidy(fitted_models[0], KEYS, conf_level=0.99)[1]
        assert wide.conf_low < narrow.conf_low
        assert wide.conf_high > narrow.conf_high


class TestGlance:
    """Test model-level summaries"""

    def test_summary_fields(self, fitted_models):
        fitted = fitted_models[0]
        summary = glance(fitted, KEYS)
        assert summary.country == "Argentina"
        assert summary.nobs == 12
        assert summary.df_resid == 10
        assert summary.df_model == 1
        assert 0.0 <= summary.r_squared <= 1.0
        assert summary.sigma == pytest.approx(np.sqrt(fitted.results.ssr / 10))

    def test_f_statistic_is_squared_slope_t(self, fitted_models):
        fitted = fitted_models[0]
        summary = glance(fitted, KEYS)
        slope = tidy(fitted, KEYS)[1]
        assert summary.f_statistic == pytest.approx(slope.statistic ** 2)


class TestCoefficientsFrame:
    """Test flattening records into a table"""

    def test_column_order(self, fitted_models):
        records = [r for m in fitted_models for r in tidy(m, KEYS)]
        df = coefficients_frame(records, KEYS)
        assert df.columns.tolist() == list(KEYS) + COEFFICIENT_COLUMNS
        assert len(df) == 2 * len(fitted_models)

    def test_empty(self):
        df = coefficients_frame([], KEYS)
        assert df.empty
        assert df.columns.tolist() == list(KEYS) + COEFFICIENT_COLUMNS
