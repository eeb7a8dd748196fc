"""
write_text renders through the system's fonts, so glyph-dependent checks
only look for *some* ink inside the box rather than exact pixels.
"""

import importlib
from xml.etree import ElementTree

import pytest

from imagesteps.errors import MissingBaseImageError, StepValidationError
from imagesteps.render import new_canvas
from imagesteps.steps.write_text import (
    BorderParams,
    WriteTextParams,
    first_baseline,
    svg_for_text_box,
    write_text,
)

from .helpers import WHITE, darkest_sum, find_non_white, pixel

write_text_mod = importlib.import_module("imagesteps.steps.write_text")


def params(**fields):
    data = {"action": "write_text", "x": 0, "y": 0, "width": 200, "height": 100, "text": "", "font_size": 20}
    data.update(fields)
    return WriteTextParams.model_validate(data)


def test_defaults():
    step = WriteTextParams.model_validate({"action": "write_text", "x": 0, "y": 0, "width": 10, "height": 10, "text": "a"})
    assert step.font == "Arial"
    assert step.font_size == 16
    assert step.color == "#000000"
    assert (step.align, step.valign) == ("left", "top")
    assert step.line_break is True
    assert step.draw_border is False


@pytest.mark.parametrize(
    "valign,lines,expected",
    [
        ("top", 1, 16),
        ("center", 1, 54),
        ("bottom", 1, 88),
        ("center", 3, 30),
        ("bottom", 0, 88),
    ],
)
def test_first_baseline(valign, lines, expected):
    assert first_baseline(params(valign=valign), lines) == pytest.approx(expected)


@pytest.mark.parametrize(
    "align,anchor,x",
    [("left", "start", "0"), ("center", "middle", "100"), ("right", "end", "200")],
)
def test_svg_alignment(align, anchor, x):
    svg = svg_for_text_box(params(align=align), ["one"])
    assert f'text-anchor="{anchor}"' in svg
    assert f'<tspan x="{x}" dy="0">one</tspan>' in svg


def test_svg_lines_step_by_line_height():
    svg = svg_for_text_box(params(), ["first", "second", "third"])
    assert '<tspan x="0" dy="0">first</tspan>' in svg
    assert '<tspan x="0" dy="24">second</tspan>' in svg
    assert '<tspan x="0" dy="24">third</tspan>' in svg


def test_svg_escapes_text_font_and_colour():
    svg = svg_for_text_box(params(font="A&B", color='"red"'), ["<b> Tom's & Jerry"])
    assert "&lt;b&gt; Tom&apos;s &amp; Jerry" in svg
    assert "A&amp;B" in svg
    assert 'fill="&quot;red&quot;"' in svg
    assert "<b>" not in svg


def test_border_variants():
    assert "<rect" not in svg_for_text_box(params(), [])
    plain = svg_for_text_box(params(draw_border=True), [])
    assert 'stroke="#000000" stroke-width="2.0"' in plain
    styled = svg_for_text_box(params(draw_border={"color": "#FF0000", "stroke_width": 4, "radius": 6}), [])
    assert 'stroke="#FF0000" stroke-width="4.0"' in styled
    assert 'rx="6.0"' in styled
    assert params(draw_border={}).draw_border == BorderParams()


def test_border_is_drawn_on_box_edge():
    out = write_text.apply(new_canvas(100, 80), {
        "action": "write_text", "x": 10, "y": 10, "width": 50, "height": 40, "text": "", "draw_border": True,
    })
    assert pixel(out, 10, 30)[0] < 128
    assert pixel(out, 35, 30) == WHITE
    assert pixel(out, 80, 30) == WHITE


def test_line_break_false_skips_wrapping(monkeypatch):
    def no_wrap(*args, **kwargs):
        raise AssertionError("wrap_text should not be called")

    monkeypatch.setattr(write_text_mod, "wrap_text", no_wrap)
    monkeypatch.setattr(write_text_mod, "rasterize_svg", lambda svg: new_canvas(1, 1))
    write_text.apply(new_canvas(10, 10), {
        "action": "write_text", "x": 0, "y": 0, "width": 10, "height": 10, "text": "a b", "line_break": False,
    })


def test_wrapping_uses_box_width_and_font(monkeypatch):
    seen = {}

    def fake_wrap(text, width, font, size):
        seen.update(text=text, width=width, font=font, size=size)
        return [text]

    monkeypatch.setattr(write_text_mod, "wrap_text", fake_wrap)
    write_text.apply(new_canvas(100, 50), {
        "action": "write_text", "x": 0, "y": 0, "width": 80, "height": 40, "text": "hi", "font": "Courier", "font_size": 12,
    })
    assert seen == {"text": "hi", "width": 80, "font": "Courier", "size": 12}


def test_renders_text_inside_box_in_colour():
    out = write_text.apply(new_canvas(200, 100), {
        "action": "write_text", "x": 10, "y": 10, "width": 180, "height": 80,
        "text": "Hello World", "font_size": 24, "color": "#FF0000",
    })

    hit = find_non_white(out, (10, 10, 190, 90))
    assert hit is not None
    r, g, b, _ = pixel(out, *hit)
    assert r >= g and r >= b
    assert find_non_white(out, (0, 0, 200, 10)) is None
    assert find_non_white(out, (0, 90, 200, 100)) is None


def test_opacity_fades_text():
    step = {"action": "write_text", "x": 0, "y": 0, "width": 200, "height": 60, "text": "Opacity", "font_size": 32}
    base = new_canvas(200, 60)

    zero = write_text.apply(base, {**step, "opacity": 0})
    half = write_text.apply(base, {**step, "opacity": 0.5})
    full = write_text.apply(base, {**step, "opacity": 1})

    assert zero.tobytes() == base.tobytes()
    box = (0, 0, 200, 60)
    assert darkest_sum(full, box) < darkest_sum(half, box) < 765


def test_requires_existing_canvas():
    with pytest.raises(MissingBaseImageError, match="write_text"):
        write_text.apply(None, {"action": "write_text"})


@pytest.mark.parametrize(
    "fields",
    [
        {"align": "justify"},
        {"valign": "middle"},
        {"font_size": 0},
        {"draw_border": {"stroke_width": 0}},
        {"text": None},
        {"x": "0"},
        {"font_size": 20.0},
        {"line_break": "yes"},
        {"opacity": True},
        {"draw_border": {"stroke_width": "2"}},
    ],
)
def test_invalid_fields_are_rejected(fields):
    data = {"action": "write_text", "x": 0, "y": 0, "width": 10, "height": 10, "text": "a", **fields}
    with pytest.raises(StepValidationError):
        write_text.apply(new_canvas(10, 10), data)


def test_font_family_with_apostrophe_survives_markup():
    svg = svg_for_text_box(params(font="O'Brien Sans"), ["x"])
    text = ElementTree.fromstring(svg.encode("utf-8")).find("{http://www.w3.org/2000/svg}text")
    assert text.get("font-family") == '"O\'Brien Sans", sans-serif'
