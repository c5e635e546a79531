"""
Exceptions raised while rendering a plot.

Combining elements never raises these; every check runs at render time, once the
full accumulated plot and the dataset schema are known.

- SchemaError: a mapping or facet references a column the dataset does not have.
- ConfigurationError: the accumulated elements conflict or cannot be drawn
  (duplicate scale on a channel, facet grid too small, unknown smoothing method,
  scale/dtype mismatch, missing required aesthetic, no data).
"""


class PlotError(Exception):
    """Base class for errors surfaced while rendering a plot."""


class SchemaError(PlotError):
    """
    Raised when a referenced column is absent from the dataset.

    The message names the offending element (global mapping, layer index and geom,
    or facet) and lists the available columns.
    """


class ConfigurationError(PlotError):
    """Raised when plot elements conflict or are not valid for the data they map."""
