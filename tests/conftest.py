"""Pytest configuration and shared fixtures."""

import pandas as pd
import pytest

from groupfit.datasets.gapminder import load_gapminder_sample


@pytest.fixture
def americas_rows():
    """Three countries, three observations each, listed as plain row mappings."""
    data = {
        ("Canada", "Americas"): [(1952, 68.75), (1957, 69.96), (1962, 71.30)],
        ("Mexico", "Americas"): [(1952, 50.789), (1957, 55.19), (1962, 58.299)],
        ("United States", "Americas"): [(1952, 68.44), (1957, 69.49), (1962, 70.21)],
    }
    return [
        {"country": country, "continent": continent, "year": year, "life_exp": value, "pop": 1_000_000}
        for (country, continent), obs in data.items()
        for year, value in obs
    ]


@pytest.fixture
def americas_df(americas_rows):
    return pd.DataFrame(americas_rows)


@pytest.fixture
def gapminder_df():
    return load_gapminder_sample()


@pytest.fixture
def degenerate_df(americas_df):
    """The three Americas groups plus one group observed in a single year only."""
    extra = pd.DataFrame(
        [
            {"country": "Atlantis", "continent": "Americas", "year": 1952, "life_exp": 40.0, "pop": 10},
            {"country": "Atlantis", "continent": "Americas", "year": 1952, "life_exp": 41.0, "pop": 10},
            {"country": "Atlantis", "continent": "Americas", "year": 1952, "life_exp": 42.0, "pop": 10},
        ]
    )
    return pd.concat([americas_df.iloc[:3], extra, americas_df.iloc[3:]], ignore_index=True)
