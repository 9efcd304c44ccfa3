"""Tests for per-group OLS fitting"""

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from groupfit.engine.fitter import INTERCEPT_TERM, fit_group
from groupfit.engine.grouper import group_dataset
from groupfit.errors import DegenerateGroup, NumericInstability


def closed_form(x, y):
    """Textbook simple regression: slope, intercept, their standard errors."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = x.size
    xm, ym = x.mean(), y.mean()
    sxx = ((x - xm) ** 2).sum()
    slope = ((x - xm) * (y - ym)).sum() / sxx
    intercept = ym - slope * xm
    resid = y - (intercept + slope * x)
    s2 = (resid ** 2).sum() / (n - 2)
    se_slope = np.sqrt(s2 / sxx)
    se_intercept = np.sqrt(s2 * (1.0 / n + xm ** 2 / sxx))
    return slope, intercept, se_slope, se_intercept


def frame(years, values):
    return pd.DataFrame({"year": years, "life_exp": values})


class TestFitGroup:
    """Test OLS against the closed-form solution"""

    def test_matches_closed_form_for_every_group(self, gapminder_df):
        for group in group_dataset(gapminder_df):
            rows = group.rows(gapminder_df)
            fitted = fit_group(rows, group.key)
            slope, intercept, se_slope, se_intercept = closed_form(rows["year"], rows["life_exp"])

            params = fitted.results.params
            bse = fitted.results.bse
            np.testing.assert_allclose(params["year"], slope, rtol=1e-9)
            np.testing.assert_allclose(params["const"], intercept, rtol=1e-9)
            np.testing.assert_allclose(bse["year"], se_slope, rtol=1e-9)
            np.testing.assert_allclose(bse["const"], se_intercept, rtol=1e-9)

    def test_matches_lstsq(self, gapminder_df):
        group = group_dataset(gapminder_df)[0]
        rows = group.rows(gapminder_df)
        X = np.column_stack([np.ones(len(rows)), rows["year"].to_numpy(dtype=float)])
        beta, *_ = np.linalg.lstsq(X, rows["life_exp"].to_numpy(dtype=float), rcond=None)
        fitted = fit_group(rows, group.key)
        np.testing.assert_allclose(fitted.results.params.to_numpy(), beta, rtol=1e-9)

    def test_p_values_use_t_with_n_minus_2_df(self, gapminder_df):
        group = group_dataset(gapminder_df)[2]
        fitted = fit_group(group.rows(gapminder_df), group.key)
        res = fitted.results
        assert fitted.df_resid == fitted.nobs - 2
        expected = 2 * stats.t.sf(np.abs(res.tvalues), df=fitted.nobs - 2)
        np.testing.assert_allclose(res.pvalues.to_numpy(), expected, rtol=1e-9)

    def test_terms_and_key(self, americas_df):
        group = group_dataset(americas_df)[0]
        fitted = fit_group(group.rows(americas_df), group.key)
        assert fitted.terms == (INTERCEPT_TERM, "year")
        assert fitted.key == ("Canada", "Americas")
        assert fitted.nobs == 3

    def test_canada_slope_positive(self, americas_df):
        group = group_dataset(americas_df)[0]
        fitted = fit_group(group.rows(americas_df), group.key)
        assert fitted.results.params["year"] == pytest.approx(0.255)

    def test_unsorted_years(self):
        rows = frame([1962, 1952, 1957, 1967], [71.3, 68.75, 69.96, 72.13])
        fitted = fit_group(rows, ("Canada", "Americas"))
        slope, intercept, _, _ = closed_form(rows["year"], rows["life_exp"])
        np.testing.assert_allclose(fitted.results.params["year"], slope, rtol=1e-9)


class TestDegenerateGroups:
    """Test rejection of groups that cannot be estimated"""

    def test_single_distinct_year(self):
        rows = frame([1952, 1952, 1952], [40.0, 41.0, 42.0])
        with pytest.raises(DegenerateGroup) as exc:
            fit_group(rows, ("Atlantis", "Americas"))
        assert exc.value.key == ("Atlantis", "Americas")
        assert exc.value.n_distinct == 1
        assert "Atlantis" in str(exc.value)

    def test_single_observation(self):
        with pytest.raises(DegenerateGroup):
            fit_group(frame([1952], [40.0]), ("Atlantis", "Americas"))

    def test_two_observations_leave_no_residual_df(self):
        with pytest.raises(DegenerateGroup) as exc:
            fit_group(frame([1952, 1957], [40.0, 45.0]), ("Atlantis", "Americas"))
        assert exc.value.n_obs == 2


class TestNumericInstability:
    """Test near-singular design matrices"""

    def test_years_equal_after_rounding(self):
        years = [2000.0, 2000.0 + 1e-12, 2000.0 + 2e-12]
        with pytest.raises(NumericInstability) as exc:
            fit_group(frame(years, [70.0, 71.0, 72.0]), ("Atlantis", "Europe"))
        assert not isinstance(exc.value, DegenerateGroup)
        assert exc.value.key == ("Atlantis", "Europe")

    def test_condition_number_limit(self, americas_df):
        group = group_dataset(americas_df)[0]
        with pytest.raises(NumericInstability) as exc:
            fit_group(group.rows(americas_df), group.key, max_condition_number=10.0)
        assert exc.value.condition_number > 10.0

    def test_no_residual_variation_names_test_statistic(self):
        rows = frame([0, 1, 2], [0.0, 0.0, 0.0])
        with pytest.raises(NumericInstability) as exc:
            fit_group(rows, ("Atlantis", "Europe"))
        assert "t statistic" in exc.value.message
