"""Tests for menu records and the menu table loader."""

import pytest

from menu_data import (
    DEFAULT_TAG_TONE,
    SAMPLE_MENU_ITEMS,
    SAMPLE_NUTRITION_FACTS,
    find_item,
    load_menu_items,
    tag_tone,
)
from ring_chart import MacroQuantities


class TestSampleMenu:
    def test_three_sample_items(self):
        assert [i.name for i in SAMPLE_MENU_ITEMS] == [
            "Margherita Pizza",
            "Caesar Salad",
            "Classic Cheeseburger",
        ]

    def test_quantities(self):
        assert SAMPLE_MENU_ITEMS[1].quantities() == MacroQuantities(60, 30, 10)

    def test_find_item(self):
        assert find_item(SAMPLE_MENU_ITEMS, "3").name == "Classic Cheeseburger"
        assert find_item(SAMPLE_MENU_ITEMS, "99") is None

    def test_nutrition_rows_use_item_calories(self):
        rows = SAMPLE_NUTRITION_FACTS.rows(calories=750)

        assert ("Calories", "750", False) in rows
        assert ("Saturated Fat", "4g", True) in rows
        assert rows[0] == ("Serving Size", "1 slice", False)


class TestTagTone:
    def test_known_tags(self):
        assert tag_tone("AI analyzed") == "#0E7490"
        assert tag_tone("Low-carb") == tag_tone("High-protein")

    def test_unknown_tag(self):
        assert tag_tone("Spicy") == DEFAULT_TAG_TONE


class TestLoadMenuItems:
    def test_csv(self, tmp_path):
        path = tmp_path / "menu.csv"
        path.write_text(
            "ID,Name,Description,Calories,Price,Tags,Fat,Protein,Carbs\n"
            "7,Falafel Wrap,\"Chickpeas, tahini\",520,8.5,Vegetarian | AI analyzed,20,15,65\n"
        )
        (item,) = load_menu_items(path)

        assert item.id == "7"
        assert item.name == "Falafel Wrap"
        assert item.description == "Chickpeas, tahini"
        assert item.price == 8.5
        assert item.tags == ("Vegetarian", "AI analyzed")
        assert item.macros == {"fat": 20.0, "protein": 15.0, "carbs": 65.0}

    def test_optional_columns_default(self, tmp_path):
        path = tmp_path / "menu.csv"
        path.write_text("name,fat,protein,carbs\nBroth,,2,x\nRice,0,1,9\n")
        items = load_menu_items(path)

        assert [i.id for i in items] == ["1", "2"]
        assert items[0].macros == {"fat": 0.0, "protein": 2.0, "carbs": 0.0}
        assert items[0].tags == ()
        assert items[0].calories == 0

    def test_missing_column(self, tmp_path):
        path = tmp_path / "menu.csv"
        path.write_text("name,fat,protein\nSoup,1,2\n")

        with pytest.raises(ValueError, match="carbs"):
            load_menu_items(path)

    def test_unsupported_type(self, tmp_path):
        path = tmp_path / "menu.json"
        path.write_text("[]")

        with pytest.raises(ValueError, match="Unsupported"):
            load_menu_items(path)

    def test_excel(self, tmp_path):
        pd = pytest.importorskip("pandas")
        pytest.importorskip("openpyxl")
        path = tmp_path / "menu.xlsx"
        pd.DataFrame(
            [{"name": "Steak", "fat": 30, "protein": 60, "carbs": 0, "tags": "High-protein"}]
        ).to_excel(path, index=False)
        (item,) = load_menu_items(path)

        assert item.name == "Steak"
        assert item.tags == ("High-protein",)
