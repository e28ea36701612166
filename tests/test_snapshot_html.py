"""Static and layout-backed resolution in HtmlSnapshot."""

from pagescan.snapshot.base import BoundingBox, ElementLayout
from pagescan.snapshot.html import HtmlSnapshot, parse_inline_style


def test_parse_inline_style_expands_shorthands() -> None:
    decls = parse_inline_style("color: red; background: #fff !important; outline: none")
    assert decls["color"] == "red"
    assert decls["background-color"] == "#fff"
    assert decls["outline-style"] == "none"
    assert parse_inline_style("background: url(a.png) no-repeat")["background-image"].startswith("url(")
    assert parse_inline_style(None) == {}


def test_query_and_document_accessors() -> None:
    snap = HtmlSnapshot(
        '<html lang="en"><head><title> Hello </title></head>'
        '<body><p id="x" class="lead big">Hi <b>there</b></p></body></html>',
        headers={"Strict-Transport-Security": "max-age=1"},
    )
    p = snap.element_by_id("x")

    assert snap.title() == "Hello"
    assert snap.root().attribute("lang") == "en"
    assert p.attribute("class") == "lead big"
    assert p.text() == "Hi there"
    assert p.own_text() == "Hi "
    assert p.query("b")[0].closest("p") == p
    assert p.parent().tag_name == "body"
    assert snap.response_header("strict-transport-security") == "max-age=1"
    assert snap.response_header("content-type") is None


def test_static_styles_inherit_and_default() -> None:
    snap = HtmlSnapshot(
        '<div style="color: #333; font-size: 20px"><h2>Head</h2><span style="font-size: 0.5em">s</span></div>'
    )
    h2 = snap.query("h2")[0]
    span = snap.query("span")[0]

    assert h2.computed_style("color") == "#333"
    assert h2.computed_style("font-size") == "30px"
    assert h2.computed_style("font-weight") == "700"
    assert span.computed_style("font-size") == "10px"
    assert span.computed_style("background-color") == "rgba(0, 0, 0, 0)"
    assert span.computed_style("outline-style") is None


def test_static_visibility() -> None:
    snap = HtmlSnapshot(
        '<div hidden><a href="#a">a</a></div>'
        '<p style="display:none"><a href="#b">b</a></p>'
        '<input type="hidden" name="t"><a href="#c">c</a>'
    )
    a, b, c = snap.query("a")

    assert not a.is_visible()
    assert not b.is_visible()
    assert c.is_visible()
    assert not snap.query("input")[0].is_visible()


def test_static_geometry_and_scroll_width() -> None:
    snap = HtmlSnapshot(
        '<img src="a.png" width="40" height="20">'
        '<div style="position:absolute; left: 10px; top: 5px; width: 500px; height: 30px">wide</div>'
        "<p>no box</p>",
        viewport_width=375,
    )
    img = snap.query("img")[0]
    div = snap.query("div")[0]

    assert img.bounding_box() == BoundingBox(width=40, height=20)
    assert not img.bounding_box().positioned
    assert div.bounding_box() == BoundingBox(x=10, y=5, width=500, height=30)
    assert snap.query("p")[0].bounding_box() is None
    assert snap.metrics.scroll_width == 510


def test_layout_overrides_static_resolution() -> None:
    layout = {
        "e1": ElementLayout(
            style={"color": "rgb(10, 10, 10)"},
            focus_style={"outline-style": "solid"},
            box=BoundingBox(x=0, y=0, width=12, height=12),
            visible=False,
        )
    }
    snap = HtmlSnapshot(
        '<button data-pagescan-id="e1" style="color: red">Go</button>',
        layout=layout,
        scroll_width=400,
    )
    button = snap.query("button")[0]

    assert button.computed_style("color") == "rgb(10, 10, 10)"
    assert button.computed_style("outline-style", ":focus") == "solid"
    assert button.computed_style("font-size") is None
    assert button.bounding_box().width == 12
    assert not button.is_visible()
    assert snap.metrics.scroll_width == 400


def test_relative_lengths_have_no_static_box() -> None:
    snap = HtmlSnapshot(
        '<button style="width: 100%; height: 48px">Submit</button>'
        '<div style="width: 50vw; height: 10px">half</div>'
        '<div style="width: calc(100% - 10px); height: 10px">calc</div>'
        '<img src="a.png" width="40" height="20" style="width: 100%">'
        '<div style="position: absolute; left: 50%; top: 0; width: 44px; height: 44px">x</div>',
        viewport_width=375,
    )
    sized, half, calc, offset = snap.query("button, div")
    for el in (sized, half, calc, snap.query("img")[0]):
        assert el.bounding_box() is None
    assert offset.bounding_box() == BoundingBox(y=0, width=44, height=44)
    assert not offset.bounding_box().positioned
    assert snap.metrics.scroll_width == 375


def test_narrow_box_comes_from_layout_only() -> None:
    layout = {
        "e1": ElementLayout(
            box=BoundingBox(x=0, y=0, width=200, height=40),
            narrow_box=BoundingBox(x=0, y=0, width=60, height=40),
        ),
        "e2": ElementLayout(box=BoundingBox(x=0, y=50, width=200, height=40)),
    }
    snap = HtmlSnapshot('<a data-pagescan-id="e1" href="/a">A</a><a data-pagescan-id="e2" href="/b">B</a>',
                        layout=layout)
    first, second = snap.query("a")

    assert first.bounding_box().width == 200
    assert first.bounding_box(narrow=True).width == 60
    assert second.bounding_box(narrow=True) is None


def test_focus_style_without_capture_is_unknown() -> None:
    snap = HtmlSnapshot(
        '<details data-pagescan-id="d1"><summary>More</summary></details>',
        layout={"d1": ElementLayout(style={"outline-style": "none", "outline-width": "0px"})},
    )
    details = snap.query("details")[0]

    assert details.computed_style("outline-style") == "none"
    assert details.computed_style("outline-style", ":focus") is None


def test_load_metrics_reach_document_metrics() -> None:
    snap = HtmlSnapshot("<p>x</p>", load_metrics={"load_time_ms": 1200.5, "js_errors": 2,
                                                  "first_contentful_paint_ms": 310.0})
    assert snap.metrics.load_time_ms == 1200.5
    assert snap.metrics.js_errors == 2
    assert snap.metrics.first_contentful_paint_ms == 310.0
    assert snap.metrics.dom_content_loaded_ms is None
    assert HtmlSnapshot("<p>x</p>").metrics.load_time_ms is None
