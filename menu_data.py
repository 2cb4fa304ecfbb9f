# menu_data.py
# Menu items shown on the scan-results list and detail views.
# Static sample menu (no recognition behind it) + a pandas loader for CSV/Excel menu tables.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ring_chart import MacroQuantities

# =======================
# Records
# =======================
@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    description: str
    calories: float
    price: float
    tags: Tuple[str, ...]
    macros: Dict[str, float]
    image: Optional[str] = None

    def quantities(self) -> MacroQuantities:
        return MacroQuantities.from_mapping(self.macros)


@dataclass(frozen=True)
class NutritionFacts:
    serving_size: str
    calories: float
    total_fat: float
    saturated_fat: float
    cholesterol: float
    sodium: float
    total_carbs: float
    fiber: float
    sugars: float
    protein: float

    def rows(self, calories: Optional[float] = None) -> List[Tuple[str, str, bool]]:
        """(label, value, is_sub_row) in display order. `calories` overrides the placeholder."""
        kcal = calories if calories else self.calories
        return [
            ("Serving Size", self.serving_size, False),
            ("Calories", f"{kcal:g}", False),
            ("Total Fat", f"{self.total_fat:g}g", False),
            ("Saturated Fat", f"{self.saturated_fat:g}g", True),
            ("Cholesterol", f"{self.cholesterol:g}mg", False),
            ("Sodium", f"{self.sodium:g}mg", False),
            ("Total Carbohydrates", f"{self.total_carbs:g}g", False),
            ("Dietary Fiber", f"{self.fiber:g}g", True),
            ("Sugars", f"{self.sugars:g}g", True),
            ("Protein", f"{self.protein:g}g", False),
        ]


# =======================
# Sample data
# =======================
SAMPLE_MENU_ITEMS: Tuple[MenuItem, ...] = (
    MenuItem(
        id="1",
        name="Margherita Pizza",
        description="Tomato, mozzarella, fresh basil",
        calories=750,
        price=14.50,
        tags=("AI analyzed", "Vegetarian"),
        macros={"fat": 35, "protein": 25, "carbs": 40},
    ),
    MenuItem(
        id="2",
        name="Caesar Salad",
        description="Romaine, parmesan, caesar dressing",
        calories=350,
        price=9.90,
        tags=("AI analyzed", "Low-carb", "Recommended for vegetars"),
        macros={"fat": 60, "protein": 30, "carbs": 10},
    ),
    MenuItem(
        id="3",
        name="Classic Cheeseburger",
        description="Beef patty, cheddar, lettuce, tomato",
        calories=610,
        price=12.30,
        tags=("AI analyzed", "High-protein"),
        macros={"fat": 40, "protein": 35, "carbs": 25},
    ),
)

# Placeholder detail values; only calories come from the item itself.
SAMPLE_NUTRITION_FACTS = NutritionFacts(
    serving_size="1 slice",
    calories=250,
    total_fat=10,
    saturated_fat=4,
    cholesterol=20,
    sodium=500,
    total_carbs=30,
    fiber=2,
    sugars=5,
    protein=12,
)
SAMPLE_ALLERGEN_NOTE = "May contain allergens: dairy, wheat, eggs (Sample)"

# =======================
# Tags
# =======================
TAG_TONES = {
    "ai analyzed": "#0E7490",
    "vegetarian": "#059669",
    "recommended for vegetars": "#059669",
    "low-carb": "#D97706",
    "high-protein": "#D97706",
}
DEFAULT_TAG_TONE = "#6B7280"


def tag_tone(tag: str) -> str:
    return TAG_TONES.get(str(tag).strip().lower(), DEFAULT_TAG_TONE)


# =======================
# Loading
# =======================
REQUIRED_COLUMNS = ("name", "fat", "protein", "carbs")
NUMERIC_COLUMNS = ("fat", "protein", "carbs", "calories", "price")


def _read_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(path)
    if suffix in (".xlsx", ".xls"):
        return pd.read_excel(path)
    raise ValueError(f"Unsupported menu file type '{suffix}' (expected .csv, .xlsx or .xls)")


def _split_tags(raw) -> Tuple[str, ...]:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ()
    return tuple(t.strip() for t in str(raw).split("|") if t.strip())


def _text(raw) -> str:
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return ""
    return str(raw).strip()


def load_menu_items(path) -> List[MenuItem]:
    """
    Read a menu table (one row per dish) into MenuItems.
    Columns are matched case-insensitively; blank numbers become 0.
    Macro values are passed through as-is, so a negative one is rejected
    later by the ring chart, not here.
    """
    path = Path(path)
    df = _read_table(path)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(
            f"Menu file {path.name} is missing column(s) {missing}. Columns present: {list(df.columns)}"
        )

    df = df.dropna(subset=["name"]).copy()
    for col in NUMERIC_COLUMNS:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0)
        else:
            df[col] = 0

    items: List[MenuItem] = []
    for pos, row in enumerate(df.to_dict(orient="records"), start=1):
        item_id = _text(row.get("id")) or str(pos)
        # pandas reads integer-looking ids as floats when the column has blanks
        if item_id.endswith(".0"):
            item_id = item_id[:-2]
        items.append(MenuItem(
            id=item_id,
            name=_text(row["name"]),
            description=_text(row.get("description")),
            calories=float(row["calories"]),
            price=float(row["price"]),
            tags=_split_tags(row.get("tags")),
            macros={k: float(row[k]) for k in ("fat", "protein", "carbs")},
            image=_text(row.get("image")) or None,
        ))
    return items


def find_item(items, item_id: str) -> Optional[MenuItem]:
    for item in items:
        if item.id == str(item_id):
            return item
    return None
