"""
Workshop walk-through on a gapminder-shaped DataFrame.

Each function returns a Plot for one step of the lesson; render it with
`gglayers.show` or export it with `save_figure`. The DataFrame needs the columns
`country`, `continent`, `year`, `lifeExp` and `gdpPercap`.
"""

from . import (
    aes,
    element_blank,
    element_text,
    facet_wrap,
    geom_boxplot,
    geom_line,
    geom_point,
    geom_smooth,
    ggplot,
    ggsave,
    labs,
    literal,
    scale_x_log10,
    theme,
    theme_bw,
    ylab,
)


def wealth_vs_life_expectancy(gapminder):
    return ggplot(gapminder, aes(x="gdpPercap", y="lifeExp")) + geom_point()


def life_expectancy_lines(gapminder):
    return ggplot(gapminder, aes(x="year", y="lifeExp", by="country", color="continent")) + geom_line()


def lines_and_points(gapminder):
    return life_expectancy_lines(gapminder) + geom_point()


def line_colour_only(gapminder):
    """Colour mapped on the line layer only, so the black points show they sit on top."""
    return (
        ggplot(gapminder, aes(x="year", y="lifeExp", by="country"))
        + geom_line(aes(color="continent"))
        + geom_point()
    )


def literal_colour_in_mapping(gapminder):
    """Asking for white points inside a mapping: "white" becomes a one-value variable with its own
    palette colour and legend entry, and the points are not white."""
    return (
        ggplot(gapminder, aes(x="year", y="lifeExp", by="country"))
        + geom_line(aes(color="continent"))
        + geom_point(aes(color=literal("white")))
    )


def blue_points(gapminder, points_last=True):
    base = ggplot(gapminder, aes(x="year", y="lifeExp", by="country"))
    lines = geom_line(aes(color="continent"))
    points = geom_point(color="blue")
    return base + lines + points if points_last else base + points + lines


def log_gdp_with_fit(gapminder):
    return (
        ggplot(gapminder, aes(x="gdpPercap", y="lifeExp"))
        + geom_point(alpha=0.5)
        + scale_x_log10()
        + geom_smooth(method="lm", size=1.5)
    )


def alpha_by_continent(gapminder):
    return ggplot(gapminder, aes(x="gdpPercap", y="lifeExp")) + geom_point(aes(alpha="continent")) + scale_x_log10()


def americas_three_columns(gapminder):
    americas = gapminder[gapminder["continent"] == "Americas"]
    return ggplot(americas, aes(x="year", y="lifeExp")) + geom_line() + facet_wrap("~ country", ncol=3)


def americas_panels(gapminder, theme_bw_last=False):
    """Faceted life expectancy for the Americas.

    With `theme_bw_last` the complete theme is added after the rotated axis text and
    wipes it out again.
    """
    americas = gapminder[gapminder["continent"] == "Americas"]
    plot = (
        ggplot(americas, aes(x="year", y="lifeExp", color="continent"))
        + geom_line()
        + facet_wrap("~ country")
        + labs(x="Year", y="Life expectancy", title="Figure 1", color="Continent")
    )
    rotated = theme(axis_text_x=element_text(angle=90, hjust=1))
    return plot + rotated + theme_bw() if theme_bw_last else plot + theme_bw() + rotated


def life_expectancy_boxplot(gapminder, after_year=1980):
    recent = gapminder[gapminder["year"] > after_year]
    return (
        ggplot(recent, aes(x="continent", y="lifeExp"))
        + geom_boxplot()
        + ylab("Life Expectancy")
        + theme(axis_text_x=element_blank(), axis_title_x=element_blank())
    )


def walkthrough(gapminder):
    """Every step of the lesson in order, as (name, plot) pairs."""
    return [
        ("wealth_vs_life_expectancy", wealth_vs_life_expectancy(gapminder)),
        ("life_expectancy_lines", life_expectancy_lines(gapminder)),
        ("lines_and_points", lines_and_points(gapminder)),
        ("line_colour_only", line_colour_only(gapminder)),
        ("literal_colour_in_mapping", literal_colour_in_mapping(gapminder)),
        ("blue_points", blue_points(gapminder)),
        ("blue_points_under_lines", blue_points(gapminder, points_last=False)),
        ("log_gdp_with_fit", log_gdp_with_fit(gapminder)),
        ("alpha_by_continent", alpha_by_continent(gapminder)),
        ("americas_three_columns", americas_three_columns(gapminder)),
        ("americas_panels", americas_panels(gapminder)),
        ("americas_panels_theme_bw_last", americas_panels(gapminder, theme_bw_last=True)),
        ("life_expectancy_boxplot", life_expectancy_boxplot(gapminder)),
    ]


def save_figure(plot, filename, width=20, height=15, dpi=300, units="cm"):
    return ggsave(filename, plot, width=width, height=height, dpi=dpi, units=units)
