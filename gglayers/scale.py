import abc

import numpy as np
import pandas as pd
import plotly.colors

from .errors import ConfigurationError
from .stat import with_attrs
from .utils import warning

NA_COLOR = "rgb(127, 127, 127)"
POSITION_CHANNELS = {"x", "y"}


def is_discrete_series(series: pd.Series) -> bool:
    return not (pd.api.types.is_numeric_dtype(series) and not pd.api.types.is_bool_dtype(series))


def sorted_categories(values: list[pd.Series]) -> list:
    combined = pd.concat(values, ignore_index=True) if values else pd.Series([], dtype=object)
    if isinstance(combined.dtype, pd.CategoricalDtype):
        present = set(combined.dropna())
        return [c for c in combined.cat.categories if c in present]
    categories = list(pd.unique(combined.dropna()))
    try:
        return sorted(categories)
    except TypeError:
        return sorted(categories, key=str)


def value_range(values: list[pd.Series]):
    combined = pd.concat(values, ignore_index=True).dropna() if values else pd.Series([], dtype=float)
    if combined.empty:
        return 0.0, 1.0
    return float(combined.min()), float(combined.max())


def rescale(series: pd.Series, domain, out_range) -> pd.Series:
    lo, hi = domain
    out_lo, out_hi = out_range
    if hi == lo:
        return pd.Series(np.full(len(series), (out_lo + out_hi) / 2), index=series.index)
    return out_lo + (series.astype(float) - lo) / (hi - lo) * (out_hi - out_lo)


class Scale:
    kind = "scale"

    def __init__(self, aesthetic_name, name=None):
        self.aesthetic_name = aesthetic_name
        self.name = name

    def __repr__(self):
        return f"{self.__class__.__name__}({self.aesthetic_name!r})"

    def describe(self):
        return f"scale_{self.aesthetic_name}_{self.kind}()"

    def validate(self) -> None:
        pass

    def transform_data(self, series: pd.Series) -> pd.Series:
        return series

    def inverse_data(self, series: pd.Series) -> pd.Series:
        return series

    def create_local_transformer(self, values: list[pd.Series]):
        return lambda df: df

    @abc.abstractmethod
    def is_discrete(self):
        pass

    @abc.abstractmethod
    def is_continuous(self):
        pass

    def valid_dtype(self, series: pd.Series) -> bool:
        return True


class PositionScale(Scale):
    def __init__(self, aesthetic_name, name, breaks, labels):
        super().__init__(aesthetic_name, name)
        self.breaks = breaks
        self.labels = labels

    def update_axis(self, fig):
        if self.aesthetic_name == "x":
            return fig.update_xaxes
        elif self.aesthetic_name == "y":
            return fig.update_yaxes

    # the axis title (self.name) is placed by the renderer, which knows the facet grid
    def apply_to_fig(self, fig):
        if self.breaks is not None:
            self.update_axis(fig)(tickvals=list(self.breaks))
        if self.labels is not None:
            self.update_axis(fig)(ticktext=list(self.labels))

    def axis_range(self, limits):
        return list(limits)


class PositionScaleContinuous(PositionScale):
    TRANSFORMATIONS = ("identity", "log10", "reverse")

    def __init__(self, axis=None, name=None, breaks=None, labels=None, transformation="identity"):
        super().__init__(axis, name, breaks, labels)
        self.transformation = transformation

    @property
    def kind(self):
        return "continuous" if self.transformation == "identity" else self.transformation

    def validate(self):
        if self.transformation not in self.TRANSFORMATIONS:
            raise ConfigurationError(f"{self.describe()}: unrecognized transformation {self.transformation!r}")

    def transform_data(self, series):
        if self.transformation != "log10":
            return series
        values = pd.to_numeric(series)
        bad = values <= 0
        if bad.any():
            warning(f"{self.describe()}: {int(bad.sum())} non-positive values became missing")
        return np.log10(values.where(~bad))

    def inverse_data(self, series):
        if self.transformation != "log10":
            return series
        return np.power(10.0, series)

    def apply_to_fig(self, fig):
        super().apply_to_fig(fig)
        if self.transformation == "log10":
            self.update_axis(fig)(type="log")
        elif self.transformation == "reverse":
            self.update_axis(fig)(autorange="reversed")

    def axis_range(self, limits):
        if self.transformation == "log10":
            return [float(np.log10(limit)) for limit in limits]
        if self.transformation == "reverse":
            return [max(limits), min(limits)]
        return list(limits)

    def is_discrete(self):
        return False

    def is_continuous(self):
        return True

    def valid_dtype(self, series):
        return not is_discrete_series(series) or pd.api.types.is_datetime64_any_dtype(series)


class PositionScaleDiscrete(PositionScale):
    kind = "discrete"

    def __init__(self, axis=None, name=None, breaks=None, labels=None):
        super().__init__(axis, name, breaks, labels)

    def is_discrete(self):
        return True

    def is_continuous(self):
        return False


class ScaleContinuous(Scale):
    kind = "continuous"

    def is_discrete(self):
        return False

    def is_continuous(self):
        return True

    def valid_dtype(self, series):
        return not is_discrete_series(series)


class ScaleDiscrete(Scale):
    kind = "discrete"

    def is_discrete(self):
        return True

    def is_continuous(self):
        return False

    def valid_dtype(self, series):
        return is_discrete_series(series)


def legend_transformer(aesthetic_name, mapping, default):
    def transform(df):
        if aesthetic_name in df.attrs:
            attrs = dict(df.attrs)
            attrs[f"{aesthetic_name}_legend"] = attrs[aesthetic_name]
            attrs[aesthetic_name] = mapping.get(attrs[aesthetic_name], default)
            return with_attrs(df, attrs)
        return df

    return transform


class ScaleColorHue(ScaleDiscrete):
    kind = "hue"

    def create_local_transformer(self, values):
        categories = sorted_categories(values)
        if not categories:
            return lambda df: df
        step = 1.0 / len(categories)
        interpolation_values = [step * i for i in range(len(categories))]
        hsv_scale = plotly.colors.get_colorscale("HSV")
        colors = plotly.colors.sample_colorscale(hsv_scale, interpolation_values)
        return legend_transformer(self.aesthetic_name, dict(zip(categories, colors)), NA_COLOR)


class ScaleColorManual(ScaleDiscrete):
    kind = "manual"

    def __init__(self, aesthetic_name, values, name=None):
        super().__init__(aesthetic_name, name)
        self.values = values

    def create_local_transformer(self, values):
        categories = sorted_categories(values)
        if isinstance(self.values, dict):
            missing = [c for c in categories if c not in self.values]
            if missing:
                raise ConfigurationError(f"{self.describe()}: no colour given for {missing}")
            color_dict = dict(self.values)
        else:
            if len(categories) > len(self.values):
                raise ConfigurationError(
                    f"{self.describe()}: insufficient values. Found {len(categories)} distinct values of "
                    f"{self.aesthetic_name} aesthetic and only {len(self.values)} colors were provided."
                )
            color_dict = dict(zip(categories, self.values))
        return legend_transformer(self.aesthetic_name, color_dict, NA_COLOR)


class ScaleColorContinuous(ScaleContinuous):
    def create_local_transformer(self, values):
        domain = value_range(values)
        colorscale = plotly.colors.get_colorscale("Viridis")

        def transform(df):
            if self.aesthetic_name not in df.columns:
                return df
            out = with_attrs(df.copy(), df.attrs)
            fractions = rescale(out[self.aesthetic_name], domain, (0.0, 1.0))
            colors = plotly.colors.sample_colorscale(colorscale, fractions.fillna(0.0).clip(0.0, 1.0).tolist())
            out[self.aesthetic_name] = [NA_COLOR if pd.isna(f) else c for f, c in zip(fractions, colors)]
            return out

        return transform


class ScaleColorIdentity(Scale):
    kind = "identity"

    def is_discrete(self):
        return True

    def is_continuous(self):
        return False


class ScaleLinetype(ScaleDiscrete):
    kind = "discrete"
    LINETYPES = ("solid", "dashed", "dotted", "dotdash", "longdash")

    def create_local_transformer(self, values):
        categories = sorted_categories(values)
        if len(categories) > len(self.LINETYPES):
            raise ConfigurationError(
                f"{self.describe()}: {len(categories)} distinct values of linetype, "
                f"but only {len(self.LINETYPES)} linetypes are available"
            )
        return legend_transformer(self.aesthetic_name, dict(zip(categories, self.LINETYPES)), "solid")


class ScaleRange(Scale):
    """Maps alpha or size onto an output range; discrete values are spread evenly over it."""

    kind = "continuous"

    def __init__(self, aesthetic_name, range, name=None):
        super().__init__(aesthetic_name, name)
        self.range = range

    def is_discrete(self):
        return False

    def is_continuous(self):
        return True

    def create_local_transformer(self, values):
        discrete = any(is_discrete_series(v) for v in values)
        if discrete:
            warning(f"Using {self.aesthetic_name} for a discrete variable is not advised.")
            categories = sorted_categories(values)
            if len(categories) == 1:
                levels = [self.range[1]]
            else:
                levels = np.linspace(self.range[0], self.range[1], len(categories)).tolist()
            return legend_transformer(self.aesthetic_name, dict(zip(categories, levels)), self.range[0])

        domain = value_range(values)

        def transform(df):
            if self.aesthetic_name not in df.columns:
                return df
            out = with_attrs(df.copy(), df.attrs)
            out[self.aesthetic_name] = rescale(out[self.aesthetic_name], domain, self.range)
            return out

        return transform


def scale_x_continuous(name=None, breaks=None, labels=None, trans="identity"):
    return PositionScaleContinuous("x", name=name, breaks=breaks, labels=labels, transformation=trans)


def scale_x_discrete(name=None, breaks=None, labels=None):
    return PositionScaleDiscrete("x", name=name, breaks=breaks, labels=labels)


def scale_x_log10(name=None, breaks=None, labels=None):
    return PositionScaleContinuous("x", name=name, breaks=breaks, labels=labels, transformation="log10")


def scale_x_reverse(name=None):
    return PositionScaleContinuous("x", name=name, transformation="reverse")


def scale_y_continuous(name=None, breaks=None, labels=None, trans="identity"):
    return PositionScaleContinuous("y", name=name, breaks=breaks, labels=labels, transformation=trans)


def scale_y_discrete(name=None, breaks=None, labels=None):
    return PositionScaleDiscrete("y", name=name, breaks=breaks, labels=labels)


def scale_y_log10(name=None, breaks=None, labels=None):
    return PositionScaleContinuous("y", name=name, breaks=breaks, labels=labels, transformation="log10")


def scale_y_reverse(name=None):
    return PositionScaleContinuous("y", name=name, transformation="reverse")


def scale_color_continuous(name=None):
    return ScaleColorContinuous("color", name)


def scale_color_hue(name=None):
    return ScaleColorHue("color", name)


def scale_color_discrete(name=None):
    return scale_color_hue(name)


def scale_color_identity():
    return ScaleColorIdentity("color")


def scale_color_manual(*, values, name=None):
    return ScaleColorManual("color", values=values, name=name)


def scale_fill_continuous(name=None):
    return ScaleColorContinuous("fill", name)


def scale_fill_hue(name=None):
    return ScaleColorHue("fill", name)


def scale_fill_discrete(name=None):
    return scale_fill_hue(name)


def scale_fill_identity():
    return ScaleColorIdentity("fill")


def scale_fill_manual(*, values, name=None):
    return ScaleColorManual("fill", values=values, name=name)


def scale_alpha(range=(0.1, 1.0), name=None):
    return ScaleRange("alpha", range, name)


def scale_size(range=(1.0, 6.0), name=None):
    return ScaleRange("size", range, name)


def scale_linetype(name=None):
    return ScaleLinetype("linetype", name)


def default_scale(aesthetic_name: str, series: pd.Series) -> Scale:
    is_continuous = not is_discrete_series(series)
    # We only know how to come up with a few default scales.
    if aesthetic_name == "x":
        return scale_x_continuous() if is_continuous else scale_x_discrete()
    elif aesthetic_name == "y":
        return scale_y_continuous() if is_continuous else scale_y_discrete()
    elif aesthetic_name in ("color", "fill"):
        return ScaleColorContinuous(aesthetic_name) if is_continuous else ScaleColorHue(aesthetic_name)
    elif aesthetic_name == "alpha":
        return scale_alpha()
    elif aesthetic_name == "size":
        return scale_size()
    elif aesthetic_name == "linetype":
        return scale_linetype()
    elif is_continuous:
        return ScaleContinuous(aesthetic_name)
    else:
        return ScaleDiscrete(aesthetic_name)
