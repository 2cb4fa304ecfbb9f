"""Tests for the scan-results PDF."""

import pytest
from pypdf import PdfReader

from build_menu_cards import _clip_lines, _wrap_text_by_words, build_menu_pdf, main
from menu_data import SAMPLE_MENU_ITEMS, MenuItem
from ring_chart import InvalidInput


def _pages(data, tmp_path):
    path = tmp_path / "out.pdf"
    path.write_bytes(data)
    return PdfReader(str(path)).pages


class TestBuildMenuPdf:
    def test_list_page_plus_one_detail_page_per_item(self, tmp_path):
        data = build_menu_pdf(SAMPLE_MENU_ITEMS)
        pages = _pages(data, tmp_path)

        assert data.startswith(b"%PDF")
        assert len(pages) == 1 + len(SAMPLE_MENU_ITEMS)
        text = pages[0].extract_text()
        assert "We've found 3 meals" in text
        assert "38%C" in text
        assert "Nutrition Facts" in pages[1].extract_text()

    def test_writes_out_path(self, tmp_path):
        out = tmp_path / "cards" / "ScanResults.pdf"
        data = build_menu_pdf(SAMPLE_MENU_ITEMS[:1], out)

        assert out.read_bytes() == data

    def test_empty_menu(self, tmp_path):
        pages = _pages(build_menu_pdf([]), tmp_path)

        assert len(pages) == 1
        assert "No menu items found." in pages[0].extract_text()

    def test_cards_overflow_to_next_page(self, tmp_path):
        items = [SAMPLE_MENU_ITEMS[0]] * 6
        pages = _pages(build_menu_pdf(items), tmp_path)

        assert len(pages) > 1 + len(items)

    def test_zero_macros_draws_track_only(self):
        item = MenuItem(id="0", name="Water", description="", calories=0, price=1, tags=(), macros={})

        assert build_menu_pdf([item]).startswith(b"%PDF")

    def test_negative_macro_raises(self):
        item = MenuItem(id="x", name="Bad", description="", calories=0, price=1, tags=(), macros={"fat": -1})

        with pytest.raises(InvalidInput):
            build_menu_pdf([item])

    def test_main_uses_menu_argument(self, tmp_path, monkeypatch):
        menu = tmp_path / "menu.csv"
        menu.write_text("name,fat,protein,carbs\nToast,1,1,8\n")
        monkeypatch.setattr("build_menu_cards.OUTPUT_DIR", str(tmp_path / "out"))

        out = main([str(menu)])

        assert out.exists()


class TestWrapping:
    def test_wraps_by_width(self):
        lines = _wrap_text_by_words("one two three four five six", "Helvetica", 10, 40)

        assert len(lines) > 1
        assert " ".join(lines) == "one two three four five six"

    def test_empty_text(self):
        assert _wrap_text_by_words("", "Helvetica", 10, 40) == [""]

    def test_clip_lines(self):
        assert _clip_lines(["a", "b", "c."], 2) == ["a", "b…"]
        assert _clip_lines(["a"], 2) == ["a"]
