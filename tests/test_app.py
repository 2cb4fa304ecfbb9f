"""Tests for the Streamlit app helpers that do not need a running session."""

import io
import zipfile

from app import charts_zip_bytes, tag_html
from menu_data import SAMPLE_MENU_ITEMS, MenuItem


def test_charts_zip_has_one_svg_per_item():
    data = charts_zip_bytes(list(SAMPLE_MENU_ITEMS))

    with zipfile.ZipFile(io.BytesIO(data)) as z:
        names = z.namelist()
        assert names == ["Margherita_Pizza.svg", "Caesar_Salad.svg", "Classic_Cheeseburger.svg"]
        assert b"60%F" not in z.read("Caesar_Salad.svg")
        assert b"58%F" in z.read("Caesar_Salad.svg")


def test_charts_zip_keeps_duplicate_names_apart():
    item = SAMPLE_MENU_ITEMS[0]
    data = charts_zip_bytes([item, item])

    with zipfile.ZipFile(io.BytesIO(data)) as z:
        assert z.namelist() == ["Margherita_Pizza.svg", "Margherita_Pizza_2.svg"]


def test_tag_html_uses_tag_tones():
    html = tag_html(("AI analyzed", "Spicy"))

    assert "#0E7490" in html
    assert "#6B7280" in html
    assert html.count("<span") == 2


def test_empty_item_chart():
    item = MenuItem(id="0", name="Water", description="", calories=0, price=0, tags=(), macros={})
    data = charts_zip_bytes([item])

    with zipfile.ZipFile(io.BytesIO(data)) as z:
        assert b"<text" not in z.read("Water.svg")
