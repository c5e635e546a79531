from __future__ import annotations

import plotly.graph_objects as go
import pytest

from gglayers import ConfigurationError, PlotSettings, aes, geom_point, ggplot, ggsave
from gglayers.save import layout_size, output_format


@pytest.fixture
def written(monkeypatch) -> dict:
    calls: dict = {}

    def fake_write_image(self, file, **kwargs) -> None:
        calls["image"] = (file, kwargs)

    def fake_write_html(self, file, **kwargs) -> None:
        calls["html"] = (file, self.layout.width, self.layout.height)

    monkeypatch.setattr(go.Figure, "write_image", fake_write_image)
    monkeypatch.setattr(go.Figure, "write_html", fake_write_html)
    return calls


@pytest.fixture
def plot(gapminder):
    return ggplot(gapminder, aes(x="year", y="lifeExp")) + geom_point()


def test_raster_export_in_centimetres(plot, written, tmp_path, settings) -> None:
    path = ggsave(tmp_path / "fig.png", plot, width=20, height=15, dpi=300, units="cm", settings=settings)
    file, kwargs = written["image"]
    assert path == tmp_path / "fig.png"
    assert file == str(tmp_path / "fig.png")
    assert kwargs == {"format": "png", "width": 756, "height": 567, "scale": 3.125}


def test_vector_export_is_not_scaled(plot, written, tmp_path, settings) -> None:
    ggsave(tmp_path / "fig.svg", plot, width=4, height=3, settings=settings)
    _, kwargs = written["image"]
    assert kwargs == {"format": "svg", "width": 384, "height": 288, "scale": 1}


def test_device_overrides_extension(plot, written, tmp_path, settings) -> None:
    ggsave(tmp_path / "figure.out", plot, device="pdf", settings=settings)
    assert written["image"][1]["format"] == "pdf"


def test_defaults_come_from_settings(plot, written, tmp_path) -> None:
    settings = PlotSettings(width=10, height=5, units="cm", dpi=96)
    ggsave(tmp_path / "fig.jpg", plot, settings=settings)
    _, kwargs = written["image"]
    assert (kwargs["width"], kwargs["height"], kwargs["scale"]) == (378, 189, 1.0)


def test_html_export(plot, written, tmp_path, settings) -> None:
    ggsave(tmp_path / "fig.html", plot, width=600, height=300, units="px", dpi=96, settings=settings)
    assert written["html"] == (str(tmp_path / "fig.html"), 600, 300)
    assert "image" not in written


def test_unknown_format_fails_before_rendering(plot, written, tmp_path, settings) -> None:
    with pytest.raises(ConfigurationError, match="xyz"):
        ggsave(tmp_path / "fig.xyz", plot, settings=settings)
    assert written == {}


@pytest.mark.parametrize("kwargs", [{"units": "furlongs"}, {"width": 0}, {"dpi": -1}])
def test_bad_size_arguments(plot, written, tmp_path, settings, kwargs) -> None:
    with pytest.raises(ConfigurationError):
        ggsave(tmp_path / "fig.png", plot, settings=settings, **kwargs)


def test_layout_size_for_pixels() -> None:
    assert layout_size(600, 300, "px", 192) == (300, 150)
    assert layout_size(1, 2, "in", 300) == (96, 192)


def test_output_format_is_case_insensitive() -> None:
    assert output_format("plot.PNG") == "png"
    with pytest.raises(ConfigurationError):
        output_format("plot")
