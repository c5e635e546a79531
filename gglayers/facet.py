from dataclasses import field
from functools import reduce
import math
from typing import Callable, Optional

import pandas as pd

from .errors import ConfigurationError
from .utils import frozen_dataclass

FACET_PREFIX = "__facet_"
SCALES = {
    "fixed": ("all", "all"),
    "free": (False, False),
    "free_x": (False, "all"),
    "free_y": ("all", False),
}


def balanced_layout(num_panels: int) -> int:
    """Column count for a wrapped grid: as square as possible, wider than tall."""
    return max(int(math.ceil(math.sqrt(num_panels))), 1)


def parse_facets(facets) -> tuple[str, ...]:
    """Accept a column name, a sequence of names, or a one-sided formula such as "~ a + b"."""
    if isinstance(facets, str):
        formula = facets.strip()
        if formula.startswith("~"):
            formula = formula[1:]
        names = [name.strip() for name in formula.split("+")]
    else:
        names = [str(name).strip() for name in facets]
    return tuple(name for name in names if name)


@frozen_dataclass
class FacetWrap:
    facets: tuple[str, ...]
    nrow: Optional[int] = None
    ncol: Optional[int] = None
    scales: str = "fixed"
    layout: Optional[Callable[[int], int]] = field(default=None, compare=False)

    @property
    def columns(self) -> list[str]:
        return [FACET_PREFIX + name for name in self.facets]

    def validate(self) -> None:
        if not self.facets:
            raise ConfigurationError("facet_wrap: at least one faceting variable is required")
        if self.scales not in SCALES:
            raise ConfigurationError(f"facet_wrap: scales must be one of {sorted(SCALES)}, got {self.scales!r}")
        for option in ("nrow", "ncol"):
            value = getattr(self, option)
            if value is not None and value < 1:
                raise ConfigurationError(f"facet_wrap: {option} must be positive, got {value}")

    def shared_axes(self):
        return SCALES[self.scales]

    def grid(self, num_panels: int) -> tuple[int, int]:
        """(rows, cols) for `num_panels` panels."""
        num_panels = max(num_panels, 1)
        if self.nrow is not None and self.ncol is not None:
            if self.nrow * self.ncol < num_panels:
                raise ConfigurationError(
                    f"facet_wrap: nrow * ncol ({self.nrow} * {self.ncol}) is smaller than the number of panels ({num_panels})"
                )
            return self.nrow, self.ncol
        if self.ncol is not None:
            return int(math.ceil(num_panels / self.ncol)), self.ncol
        if self.nrow is not None:
            ncol = int(math.ceil(num_panels / self.nrow))
            return int(math.ceil(num_panels / ncol)), ncol
        ncol = (self.layout or balanced_layout)(num_panels)
        return int(math.ceil(num_panels / ncol)), ncol

    def panel_keys(self, frames: list[pd.DataFrame]) -> list[tuple]:
        present = [frame[self.columns] for frame in frames if all(c in frame.columns for c in self.columns)]
        if not present:
            return []
        combined = pd.concat(present, ignore_index=True).drop_duplicates()
        combined = combined.sort_values(self.columns, na_position="last", kind="stable")
        return [tuple(row) for row in combined.itertuples(index=False, name=None)]

    def select(self, frame: pd.DataFrame, key: tuple) -> pd.DataFrame:
        """Rows of `frame` belonging to the panel `key`; frames without the facet columns appear in every panel."""
        if not all(c in frame.columns for c in self.columns):
            return frame
        masks = [frame[c].isna() if pd.isna(v) else frame[c] == v for c, v in zip(self.columns, key)]
        return frame[reduce(lambda a, b: a & b, masks)]

    @staticmethod
    def title(key: tuple) -> str:
        return ", ".join(str(value) for value in key)


def facet_wrap(facets, nrow=None, ncol=None, scales="fixed", layout=None):
    return FacetWrap(parse_facets(facets), nrow=nrow, ncol=ncol, scales=scales, layout=layout)
