import abc

import pandas as pd

from .errors import ConfigurationError

LEGEND_CHANNELS = ("color", "fill", "alpha", "size", "linetype")

# ggplot sizes are roughly millimetres; plotly wants pixels
SIZE_TO_PX = {"marker_size": 3.0, "line_width": 1.5, "textfont_size": 3.5}


def bar_position_gg_to_plotly(gg_pos):
    ggplot_to_plotly = {"dodge": "group", "stack": "stack", "identity": "overlay"}
    if gg_pos not in ggplot_to_plotly:
        raise ConfigurationError(f"Unsupported position {gg_pos!r}; expected one of {sorted(ggplot_to_plotly)}")
    return ggplot_to_plotly[gg_pos]


def linetype_gg_to_plotly(gg_linetype):
    linetype_dict = {
        "solid": "solid",
        "dashed": "dash",
        "dotted": "dot",
        "longdash": "longdash",
        "dotdash": "dashdot",
    }
    if gg_linetype not in linetype_dict:
        raise ConfigurationError(f"Unsupported linetype {gg_linetype!r}; expected one of {sorted(linetype_dict)}")
    return linetype_dict[gg_linetype]


class Geom:
    kind = "geom"
    required_aes: tuple = ()
    aes_to_arg: dict = {}
    # plotly arguments that only take one value per trace
    scalar_args: frozenset = frozenset()

    @property
    def name(self):
        return f"geom_{self.kind}"

    def __repr__(self):
        return f"{self.__class__.__name__}()"

    def _convert(self, plotly_name, value):
        if plotly_name == "line_dash":
            return linetype_gg_to_plotly(value)
        if plotly_name in SIZE_TO_PX:
            value = value * SIZE_TO_PX[plotly_name]
        if plotly_name in self.scalar_args and isinstance(value, pd.Series):
            value = value.iloc[0] if len(value) else None
        return value

    def _add_aesthetics_to_trace_args(self, trace_args, df, params):
        for aes_name, (plotly_name, default) in self.aes_to_arg.items():
            if params.get(aes_name) is not None:
                value = params[aes_name]
            elif aes_name in df.attrs:
                value = df.attrs[aes_name]
            elif aes_name in df.columns:
                value = df[aes_name]
            elif default is not None:
                trace_args[plotly_name] = default
                continue
            else:
                continue
            trace_args[plotly_name] = self._convert(plotly_name, value)
        if "tooltip" in df.columns:
            trace_args["hovertext"] = df["tooltip"]

    def _update_legend_trace_args(self, trace_args, df, params, legend_cache):
        # a fixed parameter replaces the mapped value, so its legend entry goes too
        names = [
            str(df.attrs[f"{aes_name}_legend"])
            for aes_name in LEGEND_CHANNELS
            if f"{aes_name}_legend" in df.attrs and aes_name in self.aes_to_arg and params.get(aes_name) is None
        ]
        if not names:
            trace_args["showlegend"] = False
            return
        name = ", ".join(dict.fromkeys(names))
        trace_args["name"] = name
        trace_args["legendgroup"] = name
        if name in legend_cache:
            trace_args["showlegend"] = False
        else:
            trace_args["showlegend"] = True
            legend_cache.add(name)

    def trace_args(self, df, params, facet_row, facet_col, meta, legend_cache):
        trace_args = {"row": facet_row, "col": facet_col, "meta": meta}
        self._add_aesthetics_to_trace_args(trace_args, df, params)
        self._update_legend_trace_args(trace_args, df, params, legend_cache)
        return trace_args

    @abc.abstractmethod
    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        pass


class GeomPoint(Geom):
    kind = "point"
    required_aes = ("x", "y")
    aes_to_arg = {
        "color": ("marker_color", "black"),
        "size": ("marker_size", None),
        "alpha": ("marker_opacity", None),
    }

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        for df in grouped_data:
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            fig.add_scatter(x=df.x, y=df.y, mode="markers", **trace_args)


class GeomLine(Geom):
    kind = "line"
    required_aes = ("x", "y")
    aes_to_arg = {
        "color": ("line_color", "black"),
        "size": ("line_width", None),
        "alpha": ("opacity", None),
        "linetype": ("line_dash", None),
    }
    scalar_args = frozenset({"line_color", "line_width", "opacity", "line_dash"})

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        for df in grouped_data:
            df = df.sort_values("x", kind="stable")
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            fig.add_scatter(x=df.x, y=df.y, mode="lines", **trace_args)


class GeomSmooth(Geom):
    kind = "smooth"
    required_aes = ("x", "y")
    aes_to_arg = {
        "color": ("line_color", "#3366FF"),
        "size": ("line_width", 1.0 * SIZE_TO_PX["line_width"]),
        "linetype": ("line_dash", None),
    }
    scalar_args = frozenset({"line_color", "line_width", "line_dash"})
    RIBBON_FILL = "rgba(153, 153, 153, 0.4)"

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        for df in grouped_data:
            if df.empty:
                continue
            if "ymin" in df.columns:
                ribbon_fill = layer.params.get("fill", self.RIBBON_FILL)
                fig.add_scatter(
                    x=df.x, y=df.ymin, mode="lines", line_width=0, showlegend=False, hoverinfo="skip",
                    row=facet_row, col=facet_col, meta=meta,
                )
                fig.add_scatter(
                    x=df.x, y=df.ymax, mode="lines", line_width=0, fill="tonexty", fillcolor=ribbon_fill,
                    showlegend=False, hoverinfo="skip", row=facet_row, col=facet_col, meta=meta,
                )
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            fig.add_scatter(x=df.x, y=df.y, mode="lines", **trace_args)


class GeomText(Geom):
    kind = "text"
    required_aes = ("x", "y", "label")
    aes_to_arg = {
        "color": ("textfont_color", "black"),
        "size": ("textfont_size", None),
        "alpha": ("opacity", None),
    }
    scalar_args = frozenset({"opacity"})

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        for df in grouped_data:
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            fig.add_scatter(x=df.x, y=df.y, text=df.label.astype(str), mode="text", **trace_args)


class GeomBar(Geom):
    kind = "bar"
    required_aes = ("x",)
    aes_to_arg = {
        "fill": ("marker_color", "#595959"),
        "color": ("marker_line_color", None),
        "alpha": ("marker_opacity", None),
    }

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        for df in grouped_data:
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            fig.add_bar(x=df.x, y=df.y, **trace_args)

        fig.update_layout(barmode=bar_position_gg_to_plotly(layer.position))


class GeomCol(GeomBar):
    kind = "col"
    required_aes = ("x", "y")


class GeomHistogram(GeomBar):
    kind = "histogram"

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        bin_width = precomputed["bin_width"]
        num_groups = len(grouped_data)

        for idx, df in enumerate(grouped_data):
            left_xs = df.x

            if layer.position == "dodge":
                x = left_xs + bin_width * (2 * idx + 1) / (2 * num_groups)
                bar_width = bin_width / num_groups
            elif layer.position in {"stack", "identity"}:
                x = left_xs + bin_width / 2
                bar_width = bin_width
            else:
                raise ConfigurationError(f"Histogram does not support position = {layer.position}")

            right_xs = left_xs + bin_width
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            fig.add_bar(
                x=x,
                y=df.y,
                customdata=list(zip(left_xs, right_xs)),
                width=bar_width,
                hovertemplate="Range: [%{customdata[0]:.3f}-%{customdata[1]:.3f})<br>Count: %{y}<br><extra></extra>",
                **trace_args,
            )

        fig.update_layout(barmode=bar_position_gg_to_plotly(layer.position))


class GeomBoxplot(Geom):
    kind = "boxplot"
    required_aes = ("y",)
    aes_to_arg = {
        "fill": ("fillcolor", "white"),
        "color": ("line_color", "#333333"),
        "alpha": ("opacity", None),
    }
    scalar_args = frozenset({"fillcolor", "line_color", "opacity"})

    def apply_to_fig(self, layer, grouped_data, fig, precomputed, facet_row, facet_col, legend_cache, meta):
        for df in grouped_data:
            trace_args = self.trace_args(df, layer.params, facet_row, facet_col, meta, legend_cache)
            box_args = {"x": df.x} if "x" in df.columns else {}
            fig.add_box(y=df.y, boxpoints="outliers", **box_args, **trace_args)

        if len(grouped_data) > 1:
            fig.update_layout(boxmode="group")
