from dataclasses import field
from typing import Any, Optional

import pandas as pd

from .aes import Aesthetic, ALIASES, aes
from .errors import ConfigurationError
from .geom import (
    Geom,
    GeomBar,
    GeomBoxplot,
    GeomCol,
    GeomHistogram,
    GeomLine,
    GeomPoint,
    GeomSmooth,
    GeomText,
    bar_position_gg_to_plotly,
)
from .stat import Stat, StatBin, StatCount, StatIdentity, StatSmooth
from .utils import frozen_dataclass


@frozen_dataclass
class Layer:
    geom: Geom
    mapping: Aesthetic = field(default_factory=dict)
    # fixed visual parameters, applied uniformly and never given a legend
    params: dict[str, Any] = field(default_factory=dict)
    stat: Stat = field(default_factory=StatIdentity)
    position: str = "identity"
    data: Optional[pd.DataFrame] = field(default=None, compare=False, repr=False)
    inherit_aes: bool = True

    @property
    def name(self) -> str:
        return self.geom.name

    def validate(self) -> None:
        self.stat.validate()
        bar_position_gg_to_plotly(self.position)
        if self.data is not None and not isinstance(self.data, pd.DataFrame):
            raise ConfigurationError(f"{self.name}: data must be a pandas DataFrame, got {type(self.data).__name__}")


def _params(**kwargs: Any) -> dict[str, Any]:
    return {ALIASES.get(k, k): v for k, v in kwargs.items() if v is not None}


def _mapping(mapping) -> Aesthetic:
    return aes(**mapping) if mapping else {}


def geom_point(mapping=None, data=None, *, color=None, size=None, alpha=None, inherit_aes=True):
    return Layer(GeomPoint(), _mapping(mapping), _params(color=color, size=size, alpha=alpha), StatIdentity(),
                 data=data, inherit_aes=inherit_aes)


def geom_line(mapping=None, data=None, *, color=None, size=None, alpha=None, linetype=None, inherit_aes=True):
    return Layer(GeomLine(), _mapping(mapping), _params(color=color, size=size, alpha=alpha, linetype=linetype),
                 StatIdentity(), data=data, inherit_aes=inherit_aes)


def geom_smooth(mapping=None, data=None, *, method="lm", se=True, level=0.95, color=None, size=None, fill=None,
                linetype=None, inherit_aes=True):
    return Layer(GeomSmooth(), _mapping(mapping), _params(color=color, size=size, fill=fill, linetype=linetype),
                 StatSmooth(method=method, se=se, level=level), data=data, inherit_aes=inherit_aes)


def geom_text(mapping=None, data=None, *, color=None, size=None, alpha=None, inherit_aes=True):
    return Layer(GeomText(), _mapping(mapping), _params(color=color, size=size, alpha=alpha), StatIdentity(),
                 data=data, inherit_aes=inherit_aes)


def geom_bar(mapping=None, data=None, *, fill=None, color=None, alpha=None, position="stack", inherit_aes=True):
    return Layer(GeomBar(), _mapping(mapping), _params(fill=fill, color=color, alpha=alpha), StatCount(),
                 position=position, data=data, inherit_aes=inherit_aes)


def geom_col(mapping=None, data=None, *, fill=None, color=None, alpha=None, position="stack", inherit_aes=True):
    return Layer(GeomCol(), _mapping(mapping), _params(fill=fill, color=color, alpha=alpha), StatIdentity(),
                 position=position, data=data, inherit_aes=inherit_aes)


def geom_histogram(mapping=None, data=None, *, min_val=None, max_val=None, bins=None, fill=None, color=None,
                   alpha=None, position="stack", inherit_aes=True):
    return Layer(GeomHistogram(), _mapping(mapping), _params(fill=fill, color=color, alpha=alpha),
                 StatBin(min_val, max_val, bins), position=position, data=data, inherit_aes=inherit_aes)


def geom_boxplot(mapping=None, data=None, *, fill=None, color=None, alpha=None, inherit_aes=True):
    return Layer(GeomBoxplot(), _mapping(mapping), _params(fill=fill, color=color, alpha=alpha), StatIdentity(),
                 data=data, inherit_aes=inherit_aes)
