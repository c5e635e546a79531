from __future__ import annotations

import logging

import numpy as np
import pytest

from gglayers import (
    ConfigurationError,
    PlotSettings,
    SchemaError,
    aes,
    coord_cartesian,
    element_text,
    geom_bar,
    geom_histogram,
    geom_line,
    geom_point,
    geom_smooth,
    geom_text,
    ggplot,
    labs,
    literal,
    scale_color_manual,
    scale_x_continuous,
    scale_x_log10,
    scale_y_reverse,
    theme,
    theme_bw,
    to_plotly,
)


def layer_traces(fig, idx: int) -> list:
    return [trace for trace in fig.data if trace.meta["layer"] == idx]


def legend_names(fig) -> list[str]:
    return [trace.name for trace in fig.data if trace.showlegend]


def test_layers_are_drawn_in_insertion_order(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp", by="country")) + geom_line() + geom_point()
    fig = to_plotly(plot, settings)

    layers = [trace.meta["layer"] for trace in fig.data]
    assert layers == sorted(layers)
    assert set(layers) == {0, 1}
    assert fig.data[0].mode == "lines"
    assert fig.data[-1].mode == "markers"


def test_by_splits_lines_per_country(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp", by="country")) + geom_line()
    fig = to_plotly(plot, settings)
    assert len(fig.data) == gapminder["country"].nunique()
    assert not legend_names(fig)


def test_local_mapping_only_affects_its_layer(gapminder, settings) -> None:
    plot = (
        ggplot(gapminder, aes(x="year", y="lifeExp", by="country"))
        + geom_line(aes(color="continent"))
        + geom_point()
    )
    fig = to_plotly(plot, settings)

    lines, points = layer_traces(fig, 0), layer_traces(fig, 1)
    assert {trace.line.color for trace in lines} != {"black"}
    assert len({trace.line.color for trace in lines}) == 3
    assert {trace.marker.color for trace in points} == {"black"}
    assert sorted(legend_names(fig)) == ["Africa", "Americas", "Asia"]


def test_fixed_colour_paints_layer_without_legend(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point(color="blue")
    fig = to_plotly(plot, settings)

    assert len(fig.data) == 1
    assert fig.data[0].marker.color == "blue"
    assert fig.data[0].showlegend is False


def test_literal_in_mapping_gives_single_legend_entry(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="gdpPercap", y="lifeExp")) + geom_point(aes(color=literal("blue")))
    fig = to_plotly(plot, settings)

    assert legend_names(fig) == ["blue"]
    assert len(fig.data) == 1
    # the literal is a category, so the colour comes from the palette
    assert fig.data[0].marker.color != "blue"
    assert fig.layout.legend.title.text == "blue"


def test_coloured_lines_with_blue_points(gapminder, settings) -> None:
    plot = (
        ggplot(gapminder, aes(x="year", y="lifeExp"))
        + geom_line(aes(color="continent"))
        + geom_point(color="blue")
    )
    fig = to_plotly(plot, settings)

    lines, points = layer_traces(fig, 0), layer_traces(fig, 1)
    assert len(plot.layers) == 2
    assert sorted(trace.name for trace in lines if trace.showlegend) == ["Africa", "Americas", "Asia"]
    assert len(points) == 1
    assert points[0].marker.color == "blue"
    assert not points[0].showlegend
    assert [trace.meta["layer"] for trace in fig.data] == [0] * len(lines) + [1]
    assert sum(len(trace.x) for trace in points) == len(gapminder)


def test_fixed_parameter_beats_mapping_on_the_same_channel(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp", color="continent")) + geom_point(color="blue")
    fig = to_plotly(plot, settings)
    assert {trace.marker.color for trace in fig.data} == {"blue"}
    assert not legend_names(fig)


def test_labels_become_axis_titles(gapminder, settings) -> None:
    plot = (
        ggplot(gapminder, aes(x="year", y="lifeExp"))
        + geom_point()
        + labs(x="Year", y="Life expectancy", title="Figure 1")
    )
    fig = to_plotly(plot, settings)
    assert fig.layout.xaxis.title.text == "Year"
    assert fig.layout.yaxis.title.text == "Life expectancy"
    assert fig.layout.title.text == "Figure 1"


def test_axis_titles_default_to_column_names(gapminder, settings) -> None:
    fig = to_plotly(ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point(), settings)
    assert fig.layout.xaxis.title.text == "year"
    assert fig.layout.yaxis.title.text == "lifeExp"


def test_scale_name_wins_over_labels(gapminder, settings) -> None:
    plot = (
        ggplot(gapminder, aes(x="year", y="lifeExp"))
        + geom_point()
        + labs(x="Year")
        + scale_x_continuous(name="Calendar year")
    )
    assert to_plotly(plot, settings).layout.xaxis.title.text == "Calendar year"


def test_legend_title_from_labels(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp", color="continent")) + geom_point() + labs(color="Continent")
    assert to_plotly(plot, settings).layout.legend.title.text == "Continent"


@pytest.mark.parametrize(
    "preset_last, expected_angle",
    [(True, 0), (False, -90)],
)
def test_theme_preset_order(gapminder, settings, preset_last, expected_angle) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point()
    rotated = theme(axis_text_x=element_text(angle=90, hjust=1))
    plot = plot + rotated + theme_bw() if preset_last else plot + theme_bw() + rotated
    fig = to_plotly(plot, settings)
    assert fig.layout.xaxis.tickangle == expected_angle


def test_default_theme_comes_from_settings(gapminder) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point()
    assert to_plotly(plot, PlotSettings(default_theme="gray")).layout.plot_bgcolor == "#EBEBEB"
    assert to_plotly(plot, PlotSettings(default_theme="bw")).layout.plot_bgcolor == "white"


def test_duplicate_scale_is_reported_at_render(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="gdpPercap", y="lifeExp")) + geom_point() + scale_x_log10()
    plot = plot + scale_x_continuous()
    with pytest.raises(ConfigurationError, match=r"scale_x_log10\(\).*scale_x_continuous\(\)"):
        to_plotly(plot, settings)


def test_missing_column_fails_at_render_not_combine(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExpectancy")) + geom_point()
    with pytest.raises(SchemaError, match="lifeExpectancy") as excinfo:
        to_plotly(plot, settings)
    message = str(excinfo.value)
    assert "global mapping" in message
    assert "gdpPercap" in message


def test_missing_column_in_layer_mapping_names_the_layer(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point() + geom_line(aes(color="region"))
    with pytest.raises(SchemaError, match=r"layer 1 \(geom_line\)"):
        to_plotly(plot, settings)


def test_missing_required_aesthetic(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year")) + geom_point()
    with pytest.raises(ConfigurationError, match="y"):
        to_plotly(plot, settings)


def test_layer_without_data(settings) -> None:
    with pytest.raises(ConfigurationError, match="no data"):
        to_plotly(ggplot(aes(x="year", y="lifeExp")) + geom_point(), settings)


def test_layer_data_overrides_plot_data(gapminder, settings) -> None:
    highlight = gapminder[gapminder["country"] == "Japan"]
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point() + geom_point(data=highlight, color="red")
    fig = to_plotly(plot, settings)
    assert len(layer_traces(fig, 1)[0].x) == len(highlight)


def test_log10_scale_keeps_original_values_on_a_log_axis(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="gdpPercap", y="lifeExp")) + geom_point() + scale_x_log10()
    fig = to_plotly(plot, settings)
    assert fig.layout.xaxis.type == "log"
    assert np.allclose(sorted(fig.data[0].x), sorted(gapminder["gdpPercap"]))


def test_log10_scale_drops_non_positive_values(gapminder, settings, caplog) -> None:
    data = gapminder.copy()
    data.loc[0, "gdpPercap"] = 0.0
    plot = ggplot(data, aes(x="gdpPercap", y="lifeExp")) + geom_point() + scale_x_log10()
    with caplog.at_level(logging.WARNING, logger="gglayers"):
        fig = to_plotly(plot, settings)
    assert len(fig.data[0].x) == len(data) - 1
    assert "Removed 1 rows containing missing values (geom_point)." in caplog.text


def test_smooth_draws_band_then_fit(gapminder, settings) -> None:
    plot = (
        ggplot(gapminder, aes(x="gdpPercap", y="lifeExp"))
        + geom_point(alpha=0.5)
        + scale_x_log10()
        + geom_smooth(method="lm", size=1.5)
    )
    fig = to_plotly(plot, settings)

    lower, upper, fit = layer_traces(fig, 1)
    assert upper.fill == "tonexty"
    assert fit.line.color == "#3366FF"
    assert fit.line.width == pytest.approx(2.25)
    assert np.isclose(min(fit.x), gapminder["gdpPercap"].min())
    assert np.isclose(max(fit.x), gapminder["gdpPercap"].max())
    assert np.all(np.asarray(lower.y) <= np.asarray(fit.y))
    assert np.all(np.asarray(fit.y) <= np.asarray(upper.y))
    assert layer_traces(fig, 0)[0].marker.opacity == 0.5


def test_smooth_without_band(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_smooth(se=False)
    fig = to_plotly(plot, settings)
    assert len(fig.data) == 1


def test_unknown_smoothing_method(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_smooth(method="loess")
    with pytest.raises(ConfigurationError, match="loess"):
        to_plotly(plot, settings)


def test_smooth_needs_continuous_x(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="continent", y="lifeExp")) + geom_smooth()
    with pytest.raises(ConfigurationError, match="stat_smooth"):
        to_plotly(plot, settings)


def test_histogram_defaults_to_thirty_bins(gapminder, settings, caplog) -> None:
    plot = ggplot(gapminder, aes(x="lifeExp")) + geom_histogram()
    with caplog.at_level(logging.WARNING, logger="gglayers"):
        fig = to_plotly(plot, settings)
    assert "defaulting to 30 bins" in caplog.text
    assert len(fig.data[0].x) == 30
    assert sum(fig.data[0].y) == len(gapminder)
    assert fig.layout.yaxis.title.text == "count"


def test_histogram_with_bins_does_not_warn(gapminder, settings, caplog) -> None:
    plot = ggplot(gapminder, aes(x="lifeExp", fill="continent")) + geom_histogram(bins=5, position="dodge")
    with caplog.at_level(logging.WARNING, logger="gglayers"):
        fig = to_plotly(plot, settings)
    assert "bins" not in caplog.text
    assert len(fig.data) == 3
    assert fig.layout.barmode == "group"
    assert sum(sum(trace.y) for trace in fig.data) == len(gapminder)


def test_bar_counts_rows_per_category(gapminder, settings) -> None:
    fig = to_plotly(ggplot(gapminder, aes(x="continent")) + geom_bar(), settings)
    counts = dict(zip(fig.data[0].x, fig.data[0].y))
    assert counts == {"Africa": 4, "Americas": 12, "Asia": 8}
    assert fig.layout.barmode == "stack"


def test_text_layer(gapminder, settings) -> None:
    latest = gapminder[gapminder["year"] == 1992]
    plot = ggplot(latest, aes(x="gdpPercap", y="lifeExp", label="country")) + geom_text()
    fig = to_plotly(plot, settings)
    assert sorted(fig.data[0].text) == sorted(latest["country"])


def test_manual_scale_with_too_few_values(gapminder, settings) -> None:
    plot = (
        ggplot(gapminder, aes(x="year", y="lifeExp", color="continent"))
        + geom_point()
        + scale_color_manual(values=["red"])
    )
    with pytest.raises(ConfigurationError, match="insufficient values"):
        to_plotly(plot, settings)


def test_manual_scale_by_name(gapminder, settings) -> None:
    colors = {"Africa": "orange", "Americas": "green", "Asia": "purple"}
    plot = (
        ggplot(gapminder, aes(x="year", y="lifeExp", color="continent"))
        + geom_point()
        + scale_color_manual(values=colors)
    )
    fig = to_plotly(plot, settings)
    assert {trace.name: trace.marker.color for trace in fig.data} == colors


def test_continuous_colour_does_not_split_groups(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp", color="gdpPercap")) + geom_point()
    fig = to_plotly(plot, settings)
    assert len(fig.data) == 1
    assert len(fig.data[0].marker.color) == len(gapminder)


def test_discrete_alpha_warns(gapminder, settings, caplog) -> None:
    plot = ggplot(gapminder, aes(x="gdpPercap", y="lifeExp")) + geom_point(aes(alpha="continent"))
    with caplog.at_level(logging.WARNING, logger="gglayers"):
        fig = to_plotly(plot, settings)
    assert "Using alpha for a discrete variable is not advised." in caplog.text
    assert sorted(trace.marker.opacity for trace in fig.data) == pytest.approx([0.1, 0.55, 1.0])


def test_coord_cartesian_zooms_without_dropping_rows(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point() + coord_cartesian(xlim=(1980, 1990))
    fig = to_plotly(plot, settings)
    assert list(fig.layout.xaxis.range) == [1980, 1990]
    assert len(fig.data[0].x) == len(gapminder)


def test_reversed_axis(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point() + scale_y_reverse()
    assert to_plotly(plot, settings).layout.yaxis.autorange == "reversed"


def test_mapped_linetype_cycles_dash_styles(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp", by="country")) + geom_line(aes(linetype="continent"))
    fig = to_plotly(plot, settings)
    shown = {trace.name: trace.line.dash for trace in fig.data if trace.showlegend}
    assert shown == {"Africa": "solid", "Americas": "dash", "Asia": "dot"}
    assert fig.layout.legend.title.text == "continent"


def test_continuous_linetype_is_rejected(gapminder, settings) -> None:
    plot = ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_line(aes(linetype="gdpPercap"))
    with pytest.raises(ConfigurationError, match="linetype"):
        to_plotly(plot, settings)
