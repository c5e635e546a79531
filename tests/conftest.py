from __future__ import annotations

import pandas as pd
import pytest

from gglayers import PlotSettings

COUNTRIES = {
    "Kenya": "Africa",
    "Brazil": "Americas",
    "Canada": "Americas",
    "Chile": "Americas",
    "India": "Asia",
    "Japan": "Asia",
}
YEARS = [1977, 1982, 1987, 1992]


@pytest.fixture
def gapminder() -> pd.DataFrame:
    rows = []
    for i, (country, continent) in enumerate(COUNTRIES.items()):
        for j, year in enumerate(YEARS):
            rows.append(
                {
                    "country": country,
                    "continent": continent,
                    "year": year,
                    "lifeExp": 50.0 + 3 * i + j,
                    "gdpPercap": 1000.0 * (i + 1) * (j + 1),
                }
            )
    return pd.DataFrame(rows)


@pytest.fixture
def settings() -> PlotSettings:
    return PlotSettings()
