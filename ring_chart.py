# ring_chart.py
# Proportional macro ring ("donut") layout: fat / protein / carbs → arc segments + dominant label.
# Pure and stateless: every call recomputes from its inputs, nothing is cached or shared.
# The drawing itself lives elsewhere (donut.py for SVG, build_menu_cards.py for PDF).

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

# =======================
# Categories + palette
# =======================
class Category(str, Enum):
    FAT = "fat"
    PROTEIN = "protein"
    CARBS = "carbs"

    @property
    def code(self) -> str:
        return _CODES[self]


_CODES = {Category.FAT: "F", Category.PROTEIN: "P", Category.CARBS: "C"}

# Layout order and tie-break priority, earliest first.
CATEGORY_ORDER: Tuple[Category, ...] = (Category.FAT, Category.PROTEIN, Category.CARBS)

DEFAULT_PALETTE: Dict[Category, str] = {
    Category.FAT: "#F59E0B",      # amber
    Category.PROTEIN: "#10B981",  # green
    Category.CARBS: "#6B7280",    # grey
}
DEFAULT_TRACK_COLOR = "#E5E7EB"
DEFAULT_LABEL_COLOR = "#374151"
DEFAULT_GAP_SIZE = 2.0  # percent of the circumference per gap
ROTATION_OFFSET = -90.0  # puts angle 0 at 12 o'clock
PERCENT_TO_DEGREES = 3.6
LINE_CAPS = ("round", "butt")


class InvalidInput(ValueError):
    """Raised when quantities or chart geometry break the input contract."""


def _check_number(name: str, value) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(v):
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    return v


def _category(key, what: str) -> Category:
    try:
        return Category(key)
    except ValueError:
        raise InvalidInput(f"unknown {what} category {key!r}") from None


# =======================
# Inputs
# =======================
@dataclass(frozen=True)
class MacroQuantities:
    fat: float
    protein: float
    carbs: float

    def __post_init__(self):
        for cat in CATEGORY_ORDER:
            v = _check_number(cat.value, getattr(self, cat.value))
            if v < 0:
                raise InvalidInput(f"{cat.value} must be non-negative, got {v}")
            object.__setattr__(self, cat.value, v)

    @classmethod
    def from_mapping(cls, data: Mapping) -> "MacroQuantities":
        """Build from a dict keyed by category name (or Category); missing keys count as 0."""
        values = {cat.value: 0 for cat in CATEGORY_ORDER}
        for key, value in data.items():
            values[_category(key, "macro").value] = value
        return cls(**values)

    def get(self, category: Category) -> float:
        return getattr(self, Category(category).value)

    @property
    def total(self) -> float:
        return self.fat + self.protein + self.carbs


@dataclass(frozen=True)
class ChartConfig:
    size: float
    stroke_width: float
    gap_size: float = DEFAULT_GAP_SIZE
    palette: Mapping[Category, str] = field(default_factory=lambda: dict(DEFAULT_PALETTE))
    track_color: str = DEFAULT_TRACK_COLOR
    label_color: str = DEFAULT_LABEL_COLOR
    line_cap: str = "round"
    label_scale: float = 0.25

    def __post_init__(self):
        size = _check_number("size", self.size)
        stroke = _check_number("stroke_width", self.stroke_width)
        gap = _check_number("gap_size", self.gap_size)
        if size <= 0:
            raise InvalidInput(f"size must be positive, got {size}")
        if stroke <= 0:
            raise InvalidInput(f"stroke_width must be positive, got {stroke}")
        if stroke >= size:
            raise InvalidInput(f"stroke_width ({stroke}) must be smaller than size ({size})")
        # two gaps at most, and they must leave room for data
        if gap < 0 or gap * 2 >= 100:
            raise InvalidInput(f"gap_size must be in [0, 50), got {gap}")
        if _check_number("label_scale", self.label_scale) <= 0:
            raise InvalidInput(f"label_scale must be positive, got {self.label_scale}")
        if self.line_cap not in LINE_CAPS:
            raise InvalidInput(f"line_cap must be one of {LINE_CAPS}, got {self.line_cap!r}")
        palette = {_category(k, "palette"): str(v) for k, v in dict(self.palette).items()}
        missing = [c.value for c in CATEGORY_ORDER if c not in palette]
        if missing:
            raise InvalidInput(f"palette has no colour for: {', '.join(missing)}")
        object.__setattr__(self, "size", size)
        object.__setattr__(self, "stroke_width", stroke)
        object.__setattr__(self, "gap_size", gap)
        object.__setattr__(self, "palette", palette)

    @classmethod
    def from_mapping(cls, data: Mapping) -> "ChartConfig":
        """
        Build from a config section such as [chart] in config.toml.
        Accepts both snake_case and the camelCase names (strokeWidth, gapSize).
        """
        palette = dict(DEFAULT_PALETTE)
        for k, v in (data.get("palette") or {}).items():
            palette[_category(k, "palette")] = v
        kwargs = dict(
            size=data.get("size"),
            stroke_width=data.get("stroke_width", data.get("strokeWidth")),
            gap_size=data.get("gap_size", data.get("gapSize", DEFAULT_GAP_SIZE)),
            palette=palette,
        )
        for key in ("track_color", "label_color", "line_cap", "label_scale"):
            if key in data:
                kwargs[key] = data[key]
        return cls(**kwargs)

    @property
    def center(self) -> float:
        return self.size / 2

    @property
    def radius(self) -> float:
        return self.size / 2 - self.stroke_width / 2

    @property
    def circumference(self) -> float:
        return 2 * math.pi * self.radius


# =======================
# Derived values
# =======================
@dataclass(frozen=True)
class NormalizedSegment:
    category: Category
    percent: float


@dataclass(frozen=True)
class LaidOutSegment:
    category: Category
    color: str
    rotation_degrees: float  # start angle, clockwise from the top
    arc_percent: float

    @property
    def arc_degrees(self) -> float:
        return self.arc_percent * PERCENT_TO_DEGREES

    def dash_array(self, circumference: float) -> str:
        return f"{circumference} {circumference}"

    def dash_offset(self, circumference: float) -> float:
        """Offset that leaves exactly arc_percent of a stroked full circle visible."""
        return circumference - (self.arc_percent / 100) * circumference


@dataclass(frozen=True)
class TrackCircle:
    center: float
    radius: float
    stroke_width: float
    color: str


@dataclass(frozen=True)
class ChartLabel:
    text: str
    category: Category
    percent: float


@dataclass(frozen=True)
class RenderSpec:
    size: float
    stroke_width: float
    track: TrackCircle
    segments: Tuple[LaidOutSegment, ...]
    label: Optional[ChartLabel]
    rotation_offset: float = ROTATION_OFFSET
    line_cap: str = "round"
    label_color: str = DEFAULT_LABEL_COLOR
    label_font_size: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def circumference(self) -> float:
        return 2 * math.pi * self.track.radius

    def to_dict(self) -> dict:
        def _plain(value):
            if isinstance(value, Category):
                return value.value
            if isinstance(value, dict):
                return {k: _plain(v) for k, v in value.items()}
            if isinstance(value, (list, tuple)):
                return [_plain(v) for v in value]
            return value
        return _plain(asdict(self))


# =======================
# Normalizer
# =======================
def normalize(fat, protein, carbs, gap_size: float = DEFAULT_GAP_SIZE) -> Tuple[NormalizedSegment, ...]:
    """
    Turn raw quantities into gap-aware percentages of the full circle.

    Gaps are taken out of the 100 first; fat and protein get their ratio of
    what is left and carbs gets the residual, so the three always add up to
    the available budget. Zero categories are left out. Returns an empty
    tuple when there is nothing to draw.
    """
    q = MacroQuantities(fat, protein, carbs)
    total = q.total
    if total <= 0:
        return ()

    non_zero = sum(1 for cat in CATEGORY_ORDER if q.get(cat) > 0)
    gaps = max(0, non_zero - 1)
    available = 100.0 - gaps * gap_size

    fat_pct = (q.fat / total) * available
    protein_pct = (q.protein / total) * available
    carbs_pct = max(0.0, available - fat_pct - protein_pct)

    percents = {Category.FAT: fat_pct, Category.PROTEIN: protein_pct, Category.CARBS: carbs_pct}
    return tuple(
        NormalizedSegment(cat, percents[cat])
        for cat in CATEGORY_ORDER
        if q.get(cat) > 0
    )


# =======================
# Segment generator
# =======================
def layout(
    segments,
    gap_size: float = DEFAULT_GAP_SIZE,
    palette: Optional[Mapping[Category, str]] = None,
) -> Tuple[LaidOutSegment, ...]:
    palette = palette or DEFAULT_PALETTE
    segments = tuple(segments)
    out = []
    accumulated = 0.0
    for i, seg in enumerate(segments):
        out.append(LaidOutSegment(
            category=seg.category,
            color=palette[seg.category],
            rotation_degrees=accumulated * PERCENT_TO_DEGREES,
            arc_percent=seg.percent,
        ))
        accumulated += seg.percent
        # gap only between two segments, never before the first or after the last
        if i + 1 < len(segments):
            accumulated += gap_size
    return tuple(out)


# =======================
# Label selector
# =======================
def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def select_label(segments) -> Optional[ChartLabel]:
    """Dominant category as e.g. "48%F"; ties go to the earlier category (fat, protein, carbs)."""
    segments = tuple(segments)
    if not segments:
        return None
    pct = {cat: 0.0 for cat in CATEGORY_ORDER}
    for seg in segments:
        pct[seg.category] = seg.percent
    f, p, c = pct[Category.FAT], pct[Category.PROTEIN], pct[Category.CARBS]

    if f >= p and f >= c:
        winner = Category.FAT
    elif p >= f and p >= c:
        winner = Category.PROTEIN
    else:
        winner = Category.CARBS

    value = pct[winner]
    return ChartLabel(text=f"{_round_half_up(value)}%{winner.code}", category=winner, percent=value)


# =======================
# Entry point
# =======================
def render_ring_chart(
    quantities: Union[MacroQuantities, Mapping],
    config: Union[ChartConfig, Mapping],
) -> RenderSpec:
    """Validate, normalize, lay out and label one chart. Raises InvalidInput before any work on bad input."""
    if not isinstance(config, ChartConfig):
        config = ChartConfig.from_mapping(config)
    if not isinstance(quantities, MacroQuantities):
        quantities = MacroQuantities.from_mapping(quantities)

    normalized = normalize(
        quantities.fat, quantities.protein, quantities.carbs, gap_size=config.gap_size
    )
    return RenderSpec(
        size=config.size,
        stroke_width=config.stroke_width,
        track=TrackCircle(
            center=config.center,
            radius=config.radius,
            stroke_width=config.stroke_width,
            color=config.track_color,
        ),
        segments=layout(normalized, gap_size=config.gap_size, palette=config.palette),
        label=select_label(normalized),
        line_cap=config.line_cap,
        label_color=config.label_color,
        label_font_size=config.size * config.label_scale,
    )
