"""
Themes: non-data styling.

A plot carries an ordered sequence of theme directives. Resolution starts from the
configured default preset and applies each directive in the order it was added:
a partial `theme(...)` overwrites only the elements it names, while a complete
preset (`theme_bw()`, ...) replaces every element, including ones set by earlier
partial directives. So

    plot + theme(axis_text_x=element_text(angle=90)) + theme_bw()

loses the rotated labels, and

    plot + theme_bw() + theme(axis_text_x=element_text(angle=90))

keeps them.
"""

from dataclasses import field
from typing import Any, Optional

from .errors import ConfigurationError
from .utils import frozen_dataclass


@frozen_dataclass
class ElementText:
    size: Optional[float] = None
    color: Optional[str] = None
    angle: Optional[float] = None
    hjust: Optional[float] = None
    vjust: Optional[float] = None
    family: Optional[str] = None
    face: Optional[str] = None


@frozen_dataclass
class ElementLine:
    color: Optional[str] = None
    size: Optional[float] = None
    linetype: Optional[str] = None


@frozen_dataclass
class ElementRect:
    fill: Optional[str] = None
    color: Optional[str] = None
    size: Optional[float] = None


@frozen_dataclass
class ElementBlank:
    pass


def element_text(size=None, color=None, angle=None, hjust=None, vjust=None, family=None, face=None, colour=None):
    return ElementText(size=size, color=color or colour, angle=angle, hjust=hjust, vjust=vjust, family=family, face=face)


def element_line(color=None, size=None, linetype=None, colour=None, linewidth=None):
    return ElementLine(color=color or colour, size=size if size is not None else linewidth, linetype=linetype)


def element_rect(fill=None, color=None, size=None, colour=None):
    return ElementRect(fill=fill, color=color or colour, size=size)


def element_blank():
    return ElementBlank()


ELEMENTS = (
    "text",
    "plot_title",
    "axis_title_x",
    "axis_title_y",
    "axis_text_x",
    "axis_text_y",
    "axis_ticks",
    "axis_line",
    "panel_background",
    "panel_border",
    "panel_grid_major",
    "panel_grid_minor",
    "plot_background",
    "legend_position",
    "legend_title",
    "legend_text",
    "strip_text",
    "strip_background",
)

TEXT = (ElementText, ElementBlank)
LINE = (ElementLine, ElementBlank)
RECT = (ElementRect, ElementBlank)
ELEMENT_TYPES = {
    "text": TEXT,
    "plot_title": TEXT,
    "axis_title_x": TEXT,
    "axis_title_y": TEXT,
    "axis_text_x": TEXT,
    "axis_text_y": TEXT,
    "axis_ticks": LINE,
    "axis_line": LINE,
    "panel_background": RECT,
    "panel_border": RECT,
    "panel_grid_major": LINE,
    "panel_grid_minor": LINE,
    "plot_background": RECT,
    "legend_position": (str, ElementBlank),
    "legend_title": TEXT,
    "legend_text": TEXT,
    "strip_text": TEXT,
    "strip_background": RECT,
}
TYPE_NAMES = {
    ElementText: "element_text()",
    ElementLine: "element_line()",
    ElementRect: "element_rect()",
    ElementBlank: "element_blank()",
    str: "a string",
}

# parents that stand for several elements
CHILDREN = {
    "axis_text": ("axis_text_x", "axis_text_y"),
    "axis_title": ("axis_title_x", "axis_title_y"),
    "panel_grid": ("panel_grid_major", "panel_grid_minor"),
}


@frozen_dataclass
class Theme:
    elements: dict[str, Any] = field(default_factory=dict)
    complete: bool = False
    name: Optional[str] = None


def normalize_element_name(name: str) -> str:
    return name.replace(".", "_")


def theme(**elements: Any) -> Theme:
    """Partial theme directive; elements given as None are left unchanged."""
    expanded: dict[str, Any] = {}
    for name, value in elements.items():
        if value is None:
            continue
        name = normalize_element_name(name)
        for child in CHILDREN.get(name, (name,)):
            expanded[child] = value
    return Theme(expanded)


def theme_gray(base_size: float = 11, base_family: Optional[str] = None) -> Theme:
    elements = {
        "text": ElementText(size=base_size, color="black", family=base_family),
        "plot_title": ElementText(size=base_size * 1.2, hjust=0),
        "axis_title_x": ElementText(size=base_size),
        "axis_title_y": ElementText(size=base_size),
        "axis_text_x": ElementText(size=base_size * 0.8, color="#4D4D4D", angle=0),
        "axis_text_y": ElementText(size=base_size * 0.8, color="#4D4D4D", angle=0),
        "axis_ticks": ElementLine(color="#333333"),
        "axis_line": ElementBlank(),
        "panel_background": ElementRect(fill="#EBEBEB"),
        "panel_border": ElementBlank(),
        "panel_grid_major": ElementLine(color="white"),
        "panel_grid_minor": ElementLine(color="#F2F2F2", size=0.5),
        "plot_background": ElementRect(fill="white", color="white"),
        "legend_position": "right",
        "legend_title": ElementText(size=base_size),
        "legend_text": ElementText(size=base_size * 0.8),
        "strip_text": ElementText(size=base_size * 0.8, color="#1A1A1A"),
        "strip_background": ElementRect(fill="#D9D9D9"),
    }
    return Theme(elements, complete=True, name="gray")


theme_grey = theme_gray


def theme_bw(base_size: float = 11, base_family: Optional[str] = None) -> Theme:
    elements = {
        **theme_gray(base_size, base_family).elements,
        "panel_background": ElementRect(fill="white"),
        "panel_border": ElementRect(color="#333333"),
        "panel_grid_major": ElementLine(color="#EBEBEB"),
        "panel_grid_minor": ElementLine(color="#F5F5F5", size=0.5),
        "strip_background": ElementRect(fill="#D9D9D9", color="#333333"),
    }
    return Theme(elements, complete=True, name="bw")


def theme_minimal(base_size: float = 11, base_family: Optional[str] = None) -> Theme:
    elements = {
        **theme_bw(base_size, base_family).elements,
        "axis_ticks": ElementBlank(),
        "panel_border": ElementBlank(),
        "strip_background": ElementBlank(),
        "plot_background": ElementBlank(),
    }
    return Theme(elements, complete=True, name="minimal")


def theme_classic(base_size: float = 11, base_family: Optional[str] = None) -> Theme:
    elements = {
        **theme_bw(base_size, base_family).elements,
        "axis_line": ElementLine(color="black"),
        "panel_border": ElementBlank(),
        "panel_grid_major": ElementBlank(),
        "panel_grid_minor": ElementBlank(),
        "strip_background": ElementRect(fill="white", color="black"),
    }
    return Theme(elements, complete=True, name="classic")


PRESETS = {
    "gray": theme_gray,
    "grey": theme_gray,
    "bw": theme_bw,
    "minimal": theme_minimal,
    "classic": theme_classic,
}


def resolve_theme(themes, default: str = "gray", base_size: float = 11) -> dict[str, Any]:
    resolved = dict(PRESETS[default](base_size).elements)
    for directive in themes:
        if directive.complete:
            resolved = dict(directive.elements)
        else:
            resolved.update(directive.elements)
    unknown = sorted(set(resolved) - set(ELEMENTS))
    if unknown:
        raise ConfigurationError(f"theme: unknown element(s) {unknown}; valid elements are {list(ELEMENTS)}")
    for name, value in resolved.items():
        allowed = ELEMENT_TYPES[name]
        if not isinstance(value, allowed):
            expected = " or ".join(TYPE_NAMES[typ] for typ in allowed)
            raise ConfigurationError(f"theme: element {name!r} must be {expected}, got {value!r}")
    return resolved


def _font(element: ElementText) -> dict:
    font = {"size": element.size, "color": element.color, "family": element.family}
    return {k: v for k, v in font.items() if v is not None}


def _xanchor(hjust: float) -> str:
    if hjust <= 0.25:
        return "left"
    if hjust >= 0.75:
        return "right"
    return "center"


def _apply_axis(update, elements, axis):
    title = elements[f"axis_title_{axis}"]
    if isinstance(title, ElementBlank):
        update(title_text="")
    else:
        update(title_font=_font(title))

    text = elements[f"axis_text_{axis}"]
    if isinstance(text, ElementBlank):
        update(showticklabels=False)
    else:
        update(tickfont=_font(text))
        if text.angle is not None:
            # ggplot angles run counter-clockwise, plotly's clockwise
            update(tickangle=-text.angle)

    ticks = elements["axis_ticks"]
    if isinstance(ticks, ElementBlank):
        update(ticks="")
    else:
        update(ticks="outside", **({"tickcolor": ticks.color} if ticks.color else {}))

    border = elements["panel_border"]
    line = elements["axis_line"]
    if isinstance(border, ElementRect):
        update(showline=True, mirror=True, linecolor=border.color or "black")
    elif isinstance(line, ElementLine):
        update(showline=True, mirror=False, linecolor=line.color or "black", **({"linewidth": line.size} if line.size else {}))
    else:
        update(showline=False)

    major = elements["panel_grid_major"]
    if isinstance(major, ElementBlank):
        update(showgrid=False)
    else:
        update(showgrid=True, **({"gridcolor": major.color} if major.color else {}))

    minor = elements["panel_grid_minor"]
    if isinstance(minor, ElementBlank):
        update(minor_showgrid=False)
    else:
        update(minor_showgrid=True, **({"minor_gridcolor": minor.color} if minor.color else {}))


LEGEND_POSITIONS = {
    "right": {},
    "bottom": {"orientation": "h", "x": 0.5, "xanchor": "center", "y": -0.15, "yanchor": "top"},
    "top": {"orientation": "h", "x": 0.5, "xanchor": "center", "y": 1.02, "yanchor": "bottom"},
    "left": {"x": -0.15, "xanchor": "right"},
}


def apply_theme(fig, elements: dict[str, Any], font_family: Optional[str] = None, strips: bool = False) -> None:
    text = elements["text"]
    base_text = text if isinstance(text, ElementText) else ElementText()
    base_font = _font(base_text)
    if font_family and "family" not in base_font:
        base_font["family"] = font_family
    fig.update_layout(font=base_font)

    title = elements["plot_title"]
    if isinstance(title, ElementBlank):
        fig.update_layout(title_text=None)
    else:
        fig.update_layout(title_font=_font(title))
        if title.hjust is not None:
            fig.update_layout(title_x=title.hjust, title_xanchor=_xanchor(title.hjust))

    _apply_axis(fig.update_xaxes, elements, "x")
    _apply_axis(fig.update_yaxes, elements, "y")

    panel = elements["panel_background"]
    fig.update_layout(plot_bgcolor=panel.fill if isinstance(panel, ElementRect) and panel.fill else "rgba(0, 0, 0, 0)")
    background = elements["plot_background"]
    fig.update_layout(
        paper_bgcolor=background.fill if isinstance(background, ElementRect) and background.fill else "white"
    )

    position = elements["legend_position"]
    if position == "none" or isinstance(position, ElementBlank):
        fig.update_layout(showlegend=False)
    else:
        if position not in LEGEND_POSITIONS:
            raise ConfigurationError(f"theme: legend_position must be one of {['none', *LEGEND_POSITIONS]}, got {position!r}")
        fig.update_layout(legend=LEGEND_POSITIONS[position])
        legend_title = elements["legend_title"]
        if isinstance(legend_title, ElementBlank):
            fig.update_layout(legend_title_text=None)
        else:
            fig.update_layout(legend_title_font=_font(legend_title))
        legend_text = elements["legend_text"]
        if isinstance(legend_text, ElementText):
            fig.update_layout(legend_font=_font(legend_text))

    if strips:
        strip_text = elements["strip_text"]
        strip_background = elements["strip_background"]
        if isinstance(strip_text, ElementBlank):
            fig.for_each_annotation(lambda a: a.update(text=""))
        else:
            fig.for_each_annotation(lambda a: a.update(font=_font(strip_text)))
        if isinstance(strip_background, ElementRect) and strip_background.fill:
            fig.for_each_annotation(lambda a: a.update(bgcolor=strip_background.fill))
