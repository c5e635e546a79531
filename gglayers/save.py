import logging
from pathlib import Path

from .config import UNITS, PlotSettings
from .errors import ConfigurationError
from .render import to_plotly

logger = logging.getLogger(__name__)

RASTER_FORMATS = {"png", "jpg", "jpeg", "webp"}
VECTOR_FORMATS = {"svg", "pdf", "eps"}
# plotly lays figures out in CSS pixels
CSS_DPI = 96
UNITS_PER_INCH = {"in": 1.0, "cm": 2.54, "mm": 25.4}


def output_format(filename, device=None) -> str:
    fmt = (device or Path(filename).suffix.lstrip(".")).lower()
    if fmt not in RASTER_FORMATS | VECTOR_FORMATS | {"html"}:
        raise ConfigurationError(
            f"ggsave: unknown graphics device {fmt or '(none)'!r} for {str(filename)!r}; supported: "
            f"{sorted(RASTER_FORMATS | VECTOR_FORMATS | {'html'})}"
        )
    return fmt


def layout_size(width, height, units, dpi) -> tuple[int, int]:
    """Figure size in CSS pixels for a physical size, or for a final pixel size at `dpi`."""
    if units == "px":
        return round(width * CSS_DPI / dpi), round(height * CSS_DPI / dpi)
    per_inch = UNITS_PER_INCH[units]
    return round(width / per_inch * CSS_DPI), round(height / per_inch * CSS_DPI)


def ggsave(filename, plot, width=None, height=None, dpi=None, units=None, device=None, settings=None):
    """Render `plot` and write it to `filename`.

    The format comes from the file extension unless `device` names it. Width and height
    are in `units` ("in", "cm", "mm" or "px"); raster formats are scaled so that one inch
    holds `dpi` pixels. Unset arguments fall back to PlotSettings.
    """
    settings = settings or PlotSettings.load()
    width = settings.width if width is None else width
    height = settings.height if height is None else height
    dpi = settings.dpi if dpi is None else dpi
    units = settings.units if units is None else units
    if units not in UNITS:
        raise ConfigurationError(f"ggsave: units must be one of {list(UNITS)}, got {units!r}")
    if width <= 0 or height <= 0 or dpi <= 0:
        raise ConfigurationError(f"ggsave: width, height and dpi must be positive, got {width}, {height}, {dpi}")
    fmt = output_format(filename, device)

    fig = to_plotly(plot, settings)
    layout_width, layout_height = layout_size(width, height, units, dpi)
    logger.info("Saving %g x %g %s image to %s", width, height, units, filename)
    if fmt == "html":
        fig.update_layout(width=layout_width, height=layout_height)
        fig.write_html(str(filename))
    else:
        scale = dpi / CSS_DPI if fmt in RASTER_FORMATS else 1
        fig.write_image(str(filename), format=fmt, width=layout_width, height=layout_height, scale=scale)
    return Path(filename)
