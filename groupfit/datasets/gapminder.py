"""
Embedded subset of the Gapminder life expectancy table.

Life expectancy at birth (years) for a handful of countries, 1952-2007 in
5-year steps. Used as the reference dataset for the example endpoint and
tests.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

import pandas as pd

YEARS: List[int] = list(range(1952, 2008, 5))

# country -> (continent, life expectancy per year in YEARS)
LIFE_EXPECTANCY: Dict[str, Tuple[str, List[float]]] = {
    "Argentina": ("Americas", [62.485, 64.399, 65.142, 65.634, 67.065, 68.481, 69.942, 70.774, 71.868, 73.275, 74.34, 75.32]),
    "Brazil": ("Americas", [50.917, 53.285, 55.665, 57.632, 59.504, 61.489, 63.336, 65.205, 67.057, 69.388, 71.006, 72.39]),
    "Canada": ("Americas", [68.75, 69.96, 71.3, 72.13, 72.88, 74.21, 75.76, 76.86, 77.95, 78.61, 79.77, 80.653]),
    "Mexico": ("Americas", [50.789, 55.19, 58.299, 60.11, 62.361, 65.032, 67.405, 69.498, 71.455, 73.67, 74.902, 76.195]),
    "United States": ("Americas", [68.44, 69.49, 70.21, 70.76, 71.34, 73.38, 74.65, 75.02, 76.09, 76.81, 77.31, 78.242]),
    "Norway": ("Europe", [72.67, 73.44, 73.47, 74.08, 74.34, 75.37, 75.97, 75.89, 77.32, 78.32, 79.05, 80.196]),
    "Sweden": ("Europe", [71.86, 72.49, 73.37, 74.16, 74.72, 75.44, 76.42, 77.19, 78.16, 79.39, 80.04, 80.884]),
    "Japan": ("Asia", [63.03, 65.5, 68.73, 71.43, 73.42, 75.38, 77.11, 78.67, 79.36, 80.69, 82.0, 82.603]),
}


def load_gapminder_sample() -> pd.DataFrame:
    """Long-format table with columns country, continent, year, life_exp."""
    rows = [
        {"country": country, "continent": continent, "year": year, "life_exp": value}
        for country, (continent, values) in LIFE_EXPECTANCY.items()
        for year, value in zip(YEARS, values)
    ]
    df = pd.DataFrame(rows, columns=["country", "continent", "year", "life_exp"])
    df["continent"] = pd.Categorical(df["continent"], categories=["Africa", "Americas", "Asia", "Europe", "Oceania"])
    return df
