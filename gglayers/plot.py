from dataclasses import field, replace
from typing import Any, Optional

import pandas as pd

from .aes import Aesthetic, aes
from .coord import CoordCartesian
from .facet import FacetWrap
from .labels import Labels
from .layer import Layer
from .scale import Scale
from .theme import Theme
from .utils import frozen_dataclass


def add_to_plot(plot, other):
    if isinstance(other, (list, tuple)):
        for element in other:
            plot = add_to_plot(plot, element)
        return plot
    for typ, get_kwargs in [
        (dict, lambda plot, other: {"aes": {**plot.aes, **aes(**other)}}),
        (CoordCartesian, lambda plot, other: {"coord_cartesian": other}),
        (FacetWrap, lambda plot, other: {"facet": other}),
        (Layer, lambda plot, other: {"layers": (*plot.layers, other)}),
        (Labels, lambda plot, other: {"labels": plot.labels.merge(other)}),
        (Scale, lambda plot, other: {"scales": (*plot.scales, other)}),
        (Theme, lambda plot, other: {"themes": (*plot.themes, other)}),
    ]:
        if isinstance(other, typ):
            return replace(plot, **get_kwargs(plot, other), prev=plot)
    raise TypeError(f"Cannot add an object of type {type(other).__name__!r} to a plot")


@frozen_dataclass
class Plot:
    data: Optional[pd.DataFrame] = field(default=None, compare=False, repr=False)
    aes: Aesthetic = field(default_factory=dict)
    layers: tuple[Layer, ...] = ()
    # explicit scales in the order they were added; conflicts surface at render time
    scales: tuple[Scale, ...] = ()
    labels: Labels = Labels()
    coord_cartesian: Optional[CoordCartesian] = None
    facet: Optional[FacetWrap] = None
    themes: tuple[Theme, ...] = ()
    prev: Optional["Plot"] = field(default=None, compare=False, repr=False)

    __add__ = add_to_plot

    def _repr_html_(self):
        from .render import to_plotly

        return to_plotly(self)._repr_html_()


def ggplot(data: Any = None, mapping: Optional[dict] = None) -> Plot:
    if isinstance(data, dict) and mapping is None:
        data, mapping = None, data
    return Plot(data, aes(**mapping) if mapping else {})


def undo(plot: Plot, *, depth: int = 1) -> Plot:
    curr = plot
    index = depth
    while curr.prev is not None and index > 0:
        curr = curr.prev
        index -= 1
    return curr


create = ggplot
combine = add_to_plot
