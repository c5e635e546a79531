import abc

import numpy as np
import pandas as pd
from scipy import stats as st

from .errors import ConfigurationError
from .utils import warning


def with_attrs(df: pd.DataFrame, attrs: dict) -> pd.DataFrame:
    df.attrs = dict(attrs)
    return df


def group_frames(df: pd.DataFrame, grouping: list[str]) -> list[pd.DataFrame]:
    """Split a layer frame into one frame per distinct combination of the grouping channels.

    The grouping values move from columns into `df.attrs`, where geoms and scales read them.
    """
    if not grouping:
        return [with_attrs(df.reset_index(drop=True), {})]
    result = []
    for keys, sub in df.groupby(grouping, sort=True, dropna=False):
        keys = keys if isinstance(keys, tuple) else (keys,)
        sub = sub.drop(columns=grouping).reset_index(drop=True)
        result.append(with_attrs(sub, dict(zip(grouping, keys))))
    return result


class Stat:
    name = "identity"
    # aesthetics the stat can only compute on numbers
    continuous_aes: tuple = ()

    def validate(self) -> None:
        pass

    def precompute(self, df: pd.DataFrame) -> dict:
        # values shared by every group and panel of one layer
        return {}

    @abc.abstractmethod
    def compute_group(self, df: pd.DataFrame, precomputed: dict) -> pd.DataFrame:
        pass

    def y_label(self):
        return None


class StatIdentity(Stat):
    def compute_group(self, df, precomputed):
        return df


class StatCount(Stat):
    name = "count"

    def compute_group(self, df, precomputed):
        if "weight" in df.columns:
            counts = df.groupby("x", sort=True)["weight"].sum()
        else:
            counts = df.groupby("x", sort=True).size()
        return with_attrs(pd.DataFrame({"x": counts.index, "y": counts.to_numpy()}), df.attrs)

    def y_label(self):
        return "count"


class StatBin(Stat):
    name = "bin"
    continuous_aes = ("x",)
    DEFAULT_BINS = 30

    def __init__(self, min_val=None, max_val=None, bins=None):
        self.min_val = min_val
        self.max_val = max_val
        self.bins = bins

    def precompute(self, df):
        if self.bins is None:
            warning(f"No number of bins was specified for geom_histogram, defaulting to {self.DEFAULT_BINS} bins")
        x = df["x"].dropna()
        start = self.min_val if self.min_val is not None else (x.min() if len(x) else 0.0)
        end = self.max_val if self.max_val is not None else (x.max() if len(x) else 1.0)
        if start == end:
            start, end = start - 0.5, end + 0.5
        bins = self.bins if self.bins is not None else self.DEFAULT_BINS
        return {"min_val": start, "max_val": end, "bins": bins, "bin_width": (end - start) / bins}

    def compute_group(self, df, precomputed):
        counts, edges = np.histogram(
            df["x"].dropna().to_numpy(dtype=float),
            bins=precomputed["bins"],
            range=(precomputed["min_val"], precomputed["max_val"]),
        )
        return with_attrs(pd.DataFrame({"x": edges[:-1], "y": counts}), df.attrs)

    def y_label(self):
        return "count"


class StatSmooth(Stat):
    name = "smooth"
    continuous_aes = ("x", "y")
    METHODS = ("lm",)

    def __init__(self, method="lm", se=True, level=0.95, n=80):
        self.method = method
        self.se = se
        self.level = level
        self.n = n

    def validate(self):
        if self.method not in self.METHODS:
            raise ConfigurationError(
                f"geom_smooth: unsupported method {self.method!r}; supported methods: {', '.join(self.METHODS)}"
            )
        if not 0 < self.level < 1:
            raise ConfigurationError(f"geom_smooth: level must be between 0 and 1, got {self.level}")

    def compute_group(self, df, precomputed):
        fit = df[["x", "y"]].dropna()
        x = fit["x"].to_numpy(dtype=float)
        y = fit["y"].to_numpy(dtype=float)
        n = len(x)
        if n < 2 or np.unique(x).size < 2:
            warning(f"geom_smooth: group {df.attrs or ''} has fewer than two distinct x values, skipping fit")
            return with_attrs(pd.DataFrame({"x": [], "y": []}), df.attrs)

        slope, intercept = np.polyfit(x, y, 1)
        grid = np.linspace(x.min(), x.max(), self.n)
        pred = intercept + slope * grid
        result = pd.DataFrame({"x": grid, "y": pred})

        if self.se and n > 2:
            residuals = y - (intercept + slope * x)
            sigma = np.sqrt(np.sum(residuals ** 2) / (n - 2))
            sxx = np.sum((x - x.mean()) ** 2)
            se_fit = sigma * np.sqrt(1.0 / n + (grid - x.mean()) ** 2 / sxx)
            t = st.t.ppf((1 + self.level) / 2, n - 2)
            result["ymin"] = pred - t * se_fit
            result["ymax"] = pred + t * se_fit
            result["se"] = se_fit

        return with_attrs(result, df.attrs)
