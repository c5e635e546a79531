import logging

import pandas as pd
from plotly.subplots import make_subplots

from .aes import resolve_mapping
from .config import PlotSettings
from .errors import ConfigurationError, SchemaError
from .facet import FACET_PREFIX
from .geom import LEGEND_CHANNELS
from .scale import POSITION_CHANNELS, default_scale, is_discrete_series
from .stat import group_frames
from .theme import apply_theme, resolve_theme
from .utils import warning

logger = logging.getLogger(__name__)

# channels that never split a layer into groups
NON_GROUPING = {"x", "y", "label", "tooltip", "weight"}
# channels that always split a layer, whatever their dtype
GROUP_CHANNELS = {"by", "group"}
# stat outputs that live on the y scale
Y_COLUMNS = ("y", "ymin", "ymax")


def layer_data(plot, layer):
    return layer.data if layer.data is not None else plot.data


def layer_mapping(plot, layer):
    return resolve_mapping(plot.aes, layer.mapping, layer.inherit_aes)


def _describe_source(layer, idx, channel):
    if channel in layer.mapping:
        return f"layer {idx} ({layer.name})"
    return f"global mapping (inherited by layer {idx}, {layer.name})"


def validate(plot) -> None:
    """Check the accumulated plot against its data; raises SchemaError or ConfigurationError."""
    for idx, layer in enumerate(plot.layers):
        layer.validate()
        data = layer_data(plot, layer)
        if data is None:
            raise ConfigurationError(f"layer {idx} ({layer.name}) has no data: pass data to ggplot() or to the layer")
        mapping = layer_mapping(plot, layer)
        for channel, expr in mapping.items():
            missing = sorted(expr.columns() - set(data.columns))
            if missing:
                raise SchemaError(
                    f"{_describe_source(layer, idx, channel)}: column(s) {missing} mapped to {channel!r} "
                    f"not found in data; available columns: {list(data.columns)}"
                )
        missing_aes = [a for a in layer.geom.required_aes if a not in mapping]
        if missing_aes:
            raise ConfigurationError(
                f"layer {idx} ({layer.name}) requires the following missing aesthetics: {', '.join(missing_aes)}"
            )

    if plot.facet is not None:
        plot.facet.validate()
        frames = [d for d in [plot.data, *(layer.data for layer in plot.layers)] if d is not None]
        if not any(all(name in d.columns for name in plot.facet.facets) for d in frames):
            available = list(frames[0].columns) if frames else []
            raise SchemaError(
                f"facet_wrap: faceting variable(s) {list(plot.facet.facets)} not found in data; "
                f"available columns: {available}"
            )

    seen = {}
    for scale in plot.scales:
        scale.validate()
        if scale.aesthetic_name in seen:
            raise ConfigurationError(
                f"Two scales for the {scale.aesthetic_name!r} aesthetic: {seen[scale.aesthetic_name].describe()} "
                f"and {scale.describe()}; only one scale per aesthetic is allowed"
            )
        seen[scale.aesthetic_name] = scale


def build_layer_frame(plot, layer):
    data = layer_data(plot, layer)
    frame = pd.DataFrame({channel: expr.evaluate(data) for channel, expr in layer_mapping(plot, layer).items()},
                         index=pd.RangeIndex(len(data)))
    if plot.facet is not None and all(name in data.columns for name in plot.facet.facets):
        for name, column in zip(plot.facet.facets, plot.facet.columns):
            frame[column] = data[name].reset_index(drop=True)
    return frame


def resolve_scales(plot, frames):
    scales = {scale.aesthetic_name: scale for scale in plot.scales}
    for idx, frame in enumerate(frames):
        for channel in frame.columns:
            if channel.startswith(FACET_PREFIX):
                continue
            if channel not in scales:
                scales[channel] = default_scale(channel, frame[channel])
            scale = scales[channel]
            if not scale.valid_dtype(frame[channel]):
                kind = "discrete" if is_discrete_series(frame[channel]) else "continuous"
                raise ConfigurationError(
                    f"layer {idx} ({plot.layers[idx].name}): {kind} values mapped to {channel!r} "
                    f"cannot be used with {scale.describe()}"
                )
        layer = plot.layers[idx]
        for channel in layer.stat.continuous_aes:
            if channel in frame.columns and is_discrete_series(frame[channel]):
                raise ConfigurationError(
                    f"layer {idx} ({layer.name}): stat_{layer.stat.name} requires a continuous {channel!r} aesthetic"
                )
    return scales


def drop_missing(layer, frame):
    required = [a for a in layer.geom.required_aes if a in frame.columns]
    kept = frame.dropna(subset=required)
    removed = len(frame) - len(kept)
    if removed:
        warning(f"Removed {removed} rows containing missing values ({layer.name}).")
    return kept


def grouping_channels(frame):
    return [
        channel for channel in frame.columns
        if channel in GROUP_CHANNELS
        or (channel not in NON_GROUPING and not channel.startswith(FACET_PREFIX) and is_discrete_series(frame[channel]))
    ]


def inverse_positions(df, scales):
    out = df.copy()
    out.attrs = dict(df.attrs)
    if "x" in scales and "x" in out.columns:
        out["x"] = scales["x"].inverse_data(out["x"])
    if "y" in scales:
        for column in Y_COLUMNS:
            if column in out.columns:
                out[column] = scales["y"].inverse_data(out[column])
    return out


def bottom_panels(num_panels, n_cols):
    """(row, col) of the lowest filled cell in each grid column; a short last row leaves gaps."""
    cells = []
    for col in range(min(num_panels, n_cols)):
        last = col + (num_panels - 1 - col) // n_cols * n_cols
        cells.append((last // n_cols + 1, col + 1))
    return cells


def axis_title(plot, scales, channel):
    scale = scales.get(channel)
    if scale is not None and scale.name is not None:
        return scale.name
    label = getattr(plot.labels, channel)
    if label is not None:
        return label
    for layer in plot.layers:
        mapping = layer_mapping(plot, layer)
        if channel in mapping:
            return mapping[channel].label
    if channel == "y":
        for layer in plot.layers:
            if layer.stat.y_label() is not None:
                return layer.stat.y_label()
    return None


def legend_title(plot, scales, frames):
    for channel in LEGEND_CHANNELS:
        for layer, frame in zip(plot.layers, frames):
            if channel not in frame.columns or layer.params.get(channel) is not None:
                continue
            if channel not in layer.geom.aes_to_arg or not is_discrete_series(frame[channel]):
                continue
            scale = scales.get(channel)
            if scale is not None and scale.name is not None:
                return scale.name
            if channel in plot.labels.legend:
                return plot.labels.legend[channel]
            return layer_mapping(plot, layer)[channel].label
    return None


def to_plotly(plot, settings=None):
    settings = settings or PlotSettings.load()
    validate(plot)
    elements = resolve_theme(plot.themes, settings.default_theme, settings.base_size)

    frames = [build_layer_frame(plot, layer) for layer in plot.layers]
    scales = resolve_scales(plot, frames)

    # position scales rewrite the data domain before any stat sees it
    for frame in frames:
        for channel in POSITION_CHANNELS & set(frame.columns):
            frame[channel] = scales[channel].transform_data(frame[channel])
    frames = [drop_missing(layer, frame) for layer, frame in zip(plot.layers, frames)]

    # Create scaling functions based on all the data:
    transformers = {}
    for channel, scale in scales.items():
        if channel in POSITION_CHANNELS:
            continue
        values = [frame[channel] for frame in frames if channel in frame.columns]
        transformers[channel] = scale.create_local_transformer(values)

    precomputed = [layer.stat.precompute(frame) for layer, frame in zip(plot.layers, frames)]

    if plot.facet is not None:
        panel_keys = plot.facet.panel_keys(frames)
        n_facet_rows, n_facet_cols = plot.facet.grid(len(panel_keys))
        shared_xaxes, shared_yaxes = plot.facet.shared_axes()
        subplot_args = {
            "rows": n_facet_rows,
            "cols": n_facet_cols,
            "shared_xaxes": shared_xaxes,
            "shared_yaxes": shared_yaxes,
            "subplot_titles": [plot.facet.title(key) for key in panel_keys],
        }
    else:
        panel_keys = [None]
        n_facet_cols = 1
        subplot_args = {"rows": 1, "cols": 1}
    logger.debug("rendering %d layers over %d panels", len(plot.layers), len(panel_keys))
    fig = make_subplots(**subplot_args)

    # Need to know what I've added to legend already so we don't do it more than once.
    legend_cache = set()
    for idx, (layer, frame) in enumerate(zip(plot.layers, frames)):
        grouping = grouping_channels(frame)
        facet_columns = [c for c in frame.columns if c.startswith(FACET_PREFIX)]
        for panel_idx, key in enumerate(panel_keys):
            panel_frame = frame if key is None else plot.facet.select(frame, key)
            if panel_frame.empty:
                continue
            panel_frame = panel_frame.drop(columns=facet_columns)
            grouped = [layer.stat.compute_group(df, precomputed[idx]) for df in group_frames(panel_frame, grouping)]
            scaled_grouped_dfs = []
            for df in grouped:
                scaled_df = inverse_positions(df, scales)
                relevant_aesthetics = [name for name in [*df.columns, *df.attrs] if name in transformers]
                for relevant_aesthetic in relevant_aesthetics:
                    scaled_df = transformers[relevant_aesthetic](scaled_df)
                scaled_grouped_dfs.append(scaled_df)
            facet_row = panel_idx // n_facet_cols + 1
            facet_col = panel_idx % n_facet_cols + 1
            meta = {"layer": idx, "geom": layer.geom.kind, "panel": panel_idx}
            layer.geom.apply_to_fig(
                layer, scaled_grouped_dfs, fig, precomputed[idx], facet_row, facet_col, legend_cache, meta
            )

    if plot.labels.title is not None:
        fig.update_layout(title_text=plot.labels.title)
    x_title = axis_title(plot, scales, "x")
    for row, col in bottom_panels(max(len(panel_keys), 1), n_facet_cols):
        fig.update_xaxes(showticklabels=True, row=row, col=col)
        if x_title is not None:
            fig.update_xaxes(title_text=x_title, row=row, col=col)
    y_title = axis_title(plot, scales, "y")
    if y_title is not None:
        fig.update_yaxes(title_text=y_title, col=1)
    legend = legend_title(plot, scales, frames)
    if legend is not None:
        fig.update_layout(legend_title_text=legend)

    for channel in ("x", "y"):
        if channel in scales:
            scales[channel].apply_to_fig(fig)

    if plot.coord_cartesian is not None:
        if plot.coord_cartesian.xlim is not None:
            xlim = plot.coord_cartesian.xlim
            fig.update_xaxes(range=scales["x"].axis_range(xlim) if "x" in scales else list(xlim))
        if plot.coord_cartesian.ylim is not None:
            ylim = plot.coord_cartesian.ylim
            fig.update_yaxes(range=scales["y"].axis_range(ylim) if "y" in scales else list(ylim))

    apply_theme(fig, elements, settings.font_family, strips=plot.facet is not None)
    return fig


render = to_plotly


def show(plot, settings=None):
    to_plotly(plot, settings).show()
