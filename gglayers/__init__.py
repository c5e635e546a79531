import logging

from .aes import Column, Expression, Literal, aes, col, literal
from .config import PlotSettings
from .coord import coord_cartesian
from .errors import ConfigurationError, PlotError, SchemaError
from .facet import balanced_layout, facet_wrap
from .labels import ggtitle, labs, xlab, ylab
from .layer import (
    Layer,
    geom_bar,
    geom_boxplot,
    geom_col,
    geom_histogram,
    geom_line,
    geom_point,
    geom_smooth,
    geom_text,
)
from .plot import Plot, combine, create, ggplot, undo
from .render import render, show, to_plotly
from .save import ggsave
from .scale import (
    scale_alpha,
    scale_color_continuous,
    scale_color_discrete,
    scale_color_hue,
    scale_color_identity,
    scale_color_manual,
    scale_fill_continuous,
    scale_fill_discrete,
    scale_fill_hue,
    scale_fill_identity,
    scale_fill_manual,
    scale_linetype,
    scale_size,
    scale_x_continuous,
    scale_x_discrete,
    scale_x_log10,
    scale_x_reverse,
    scale_y_continuous,
    scale_y_discrete,
    scale_y_log10,
    scale_y_reverse,
)
from .theme import (
    element_blank,
    element_line,
    element_rect,
    element_text,
    resolve_theme,
    theme,
    theme_bw,
    theme_classic,
    theme_gray,
    theme_grey,
    theme_minimal,
)

logging.getLogger("gglayers").addHandler(logging.NullHandler())

scale_colour_continuous = scale_color_continuous
scale_colour_discrete = scale_color_discrete
scale_colour_hue = scale_color_hue
scale_colour_identity = scale_color_identity
scale_colour_manual = scale_color_manual

__all__ = [
    "Column",
    "ConfigurationError",
    "Expression",
    "Layer",
    "Literal",
    "Plot",
    "PlotError",
    "PlotSettings",
    "SchemaError",
    "aes",
    "balanced_layout",
    "col",
    "combine",
    "coord_cartesian",
    "create",
    "element_blank",
    "element_line",
    "element_rect",
    "element_text",
    "facet_wrap",
    "geom_bar",
    "geom_boxplot",
    "geom_col",
    "geom_histogram",
    "geom_line",
    "geom_point",
    "geom_smooth",
    "geom_text",
    "ggplot",
    "ggsave",
    "ggtitle",
    "labs",
    "literal",
    "render",
    "resolve_theme",
    "scale_alpha",
    "scale_color_continuous",
    "scale_color_discrete",
    "scale_color_hue",
    "scale_color_identity",
    "scale_color_manual",
    "scale_colour_continuous",
    "scale_colour_discrete",
    "scale_colour_hue",
    "scale_colour_identity",
    "scale_colour_manual",
    "scale_fill_continuous",
    "scale_fill_discrete",
    "scale_fill_hue",
    "scale_fill_identity",
    "scale_fill_manual",
    "scale_linetype",
    "scale_size",
    "scale_x_continuous",
    "scale_x_discrete",
    "scale_x_log10",
    "scale_x_reverse",
    "scale_y_continuous",
    "scale_y_discrete",
    "scale_y_log10",
    "scale_y_reverse",
    "show",
    "theme",
    "theme_bw",
    "theme_classic",
    "theme_gray",
    "theme_grey",
    "theme_minimal",
    "to_plotly",
    "undo",
    "xlab",
    "ylab",
]
