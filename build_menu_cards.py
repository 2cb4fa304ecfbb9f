# build_menu_cards.py
# Generate a "Scan Results" PDF: one card per menu item (tags, name, price, description, calories,
# macro ring chart), followed by one detail page per item (large chart + nutrition facts).
# - Ring charts are painted with reportlab primitives straight from ring_chart.RenderSpec

import io
import sys
import tomllib  # stdlib (3.11+) to read config.toml
from pathlib import Path
from typing import List, Optional, Sequence

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from menu_data import (
    SAMPLE_ALLERGEN_NOTE,
    SAMPLE_MENU_ITEMS,
    SAMPLE_NUTRITION_FACTS,
    MenuItem,
    load_menu_items,
    tag_tone,
)
from ring_chart import ChartConfig, RenderSpec, render_ring_chart

# ========= load config (paths + chart sizes) =========
def _load_cfg() -> dict:
    here = Path(__file__).parent
    cfg_path = here / "Configs" / "config.toml"
    if cfg_path.exists():
        with open(cfg_path, "rb") as f:
            return tomllib.load(f)
    return {}

_cfg = _load_cfg()

# ========= CONFIG (from config.toml, with sane defaults) =========
HERE = Path(__file__).parent

MENU_PATH  = str(HERE / _cfg.get("paths", {}).get("menu", "Configs/sample_menu.csv"))
OUTPUT_DIR = str(HERE / _cfg.get("paths", {}).get("out_cards", "MenuCards"))

# Built-in PDF fonts unless TTFs are configured under [fonts]
FONT_BOLD_NAME = _cfg.get("fonts", {}).get("bold_name", "Helvetica-Bold")
FONT_MED_NAME  = _cfg.get("fonts", {}).get("medium_name", "Helvetica")
FONT_BOLD_PATH = _cfg.get("fonts", {}).get("bold_path")
FONT_MED_PATH  = _cfg.get("fonts", {}).get("medium_path")

_cards = _cfg.get("cards", {})
CARD_CHART_SIZE: float = float(_cards.get("chart_size", 64))
CARD_CHART_STROKE: float = float(_cards.get("chart_stroke_width", 7))
DETAIL_CHART_SIZE: float = float(_cards.get("detail_chart_size", 160))
DETAIL_CHART_STROKE: float = float(_cards.get("detail_chart_stroke_width", 16))

# ========= CARD LAYOUT (tweak here) =========
PAGE_MARGIN: float = 48.0
CARD_HEIGHT: float = 150.0
CARD_GAP: float = 18.0
CARD_RADIUS: float = 12.0
CARD_PAD: float = 14.0
TEXT_LEFT_OFFSET: float = 110.0   # text column starts this far right of the card edge
DESC_FONT_SIZE: float = 10.0
DESC_LINE_SPACING: float = 13.0
DESC_MAX_LINES: int = 2

INK        = HexColor("#111827")
MUTED      = HexColor("#6B7280")
CARD_FILL  = HexColor("#FFFFFF")
CARD_EDGE  = HexColor("#E5E7EB")
PAGE_FILL  = HexColor("#F9FAFB")
ACCENT     = HexColor("#10B981")
WARN_FILL  = HexColor("#FFFBEB")
WARN_INK   = HexColor("#B45309")


def _chart_config(size: float, stroke_width: float) -> ChartConfig:
    section = dict(_cfg.get("chart", {}))
    section["size"] = size
    section["stroke_width"] = stroke_width
    return ChartConfig.from_mapping(section)

# ========= FONTS =========
def register_fonts():
    for name, path in ((FONT_BOLD_NAME, FONT_BOLD_PATH), (FONT_MED_NAME, FONT_MED_PATH)):
        if not path:
            continue
        font_path = HERE / path
        if font_path.exists():
            pdfmetrics.registerFont(TTFont(name, str(font_path)))
        else:
            print(f"[warn] font file not found: {font_path}")

# ========= TEXT WRAPPING =========
def _string_width(text: str, font_name: str, font_size: float) -> float:
    return pdfmetrics.stringWidth(text, font_name, font_size)

def _wrap_text_by_words(text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    """
    Greedy word-wrapping using measured widths.
    A single word wider than max_width gets a line of its own.
    """
    words = str(text or "").split()
    if not words:
        return [""]
    lines: List[str] = []
    current: List[str] = []
    for w in words:
        trial = current + [w]
        if current and _string_width(" ".join(trial), font_name, font_size) > max_width:
            lines.append(" ".join(current))
            current = [w]
        else:
            current = trial
    if current:
        lines.append(" ".join(current))
    return lines

def _clip_lines(lines: List[str], max_lines: int) -> List[str]:
    if len(lines) <= max_lines:
        return lines
    kept = lines[:max_lines]
    kept[-1] = kept[-1].rstrip(".,; ") + "…"
    return kept

# ========= RING =========
def draw_ring(c: canvas.Canvas, spec: RenderSpec, x: float, y: float, font_name: str = FONT_BOLD_NAME):
    """
    Paint a RenderSpec with its bounding square's lower-left corner at (x, y).
    PDF angles run counter-clockwise from 3 o'clock, so a clockwise-from-top
    arc starting at `rotation` covers [90 - rotation - sweep, 90 - rotation].
    """
    r = spec.track.radius
    cx = x + spec.track.center
    cy = y + spec.track.center

    c.saveState()
    c.setLineWidth(spec.track.stroke_width)
    c.setStrokeColor(HexColor(spec.track.color))
    c.circle(cx, cy, r, stroke=1, fill=0)

    c.setLineWidth(spec.stroke_width)
    c.setLineCap(1 if spec.line_cap == "round" else 0)
    for seg in spec.segments:
        sweep = seg.arc_degrees
        if sweep <= 0:
            continue
        start = 90.0 - seg.rotation_degrees - sweep
        c.setStrokeColor(HexColor(seg.color))
        c.arc(cx - r, cy - r, cx + r, cy + r, startAng=start, extent=sweep)

    if spec.label is not None:
        fs = spec.label_font_size
        c.setFillColor(HexColor(spec.label_color))
        c.setFont(font_name, fs)
        c.drawCentredString(cx, cy - fs * 0.35, spec.label.text)
    c.restoreState()

# ========= CARDS =========
def _draw_tags(c: canvas.Canvas, tags: Sequence[str], x: float, y: float, max_x: float):
    font_size = 8.0
    for tag in tags:
        w = _string_width(tag, FONT_BOLD_NAME, font_size) + 12
        if x + w > max_x:
            break
        c.setFillColor(HexColor(tag_tone(tag)))
        c.roundRect(x, y - 4, w, font_size + 8, 6, stroke=0, fill=1)
        c.setFillColor(HexColor("#FFFFFF"))
        c.setFont(FONT_BOLD_NAME, font_size)
        c.drawString(x + 6, y, tag)
        x += w + 5

def draw_card(c: canvas.Canvas, item: MenuItem, x: float, y: float, width: float):
    """One list card with its lower-left corner at (x, y)."""
    c.setStrokeColor(CARD_EDGE)
    c.setFillColor(CARD_FILL)
    c.roundRect(x, y, width, CARD_HEIGHT, CARD_RADIUS, stroke=1, fill=1)

    spec = render_ring_chart(item.quantities(), _chart_config(CARD_CHART_SIZE, CARD_CHART_STROKE))
    chart_x = x + (TEXT_LEFT_OFFSET - CARD_CHART_SIZE) / 2
    chart_y = y + (CARD_HEIGHT - CARD_CHART_SIZE) / 2
    draw_ring(c, spec, chart_x, chart_y)

    left = x + TEXT_LEFT_OFFSET
    right = x + width - CARD_PAD
    top = y + CARD_HEIGHT - CARD_PAD

    _draw_tags(c, item.tags, left, top - 10, right)

    c.setFillColor(INK)
    c.setFont(FONT_BOLD_NAME, 14)
    c.drawString(left, top - 34, item.name)
    c.setFont(FONT_BOLD_NAME, 13)
    c.drawRightString(right, top - 34, f"${item.price:.2f}")

    c.setFillColor(MUTED)
    c.setFont(FONT_MED_NAME, DESC_FONT_SIZE)
    desc_width = max(0.0, right - left - 60)
    lines = _clip_lines(_wrap_text_by_words(item.description, FONT_MED_NAME, DESC_FONT_SIZE, desc_width), DESC_MAX_LINES)
    line_y = top - 52
    for line in lines:
        c.drawString(left, line_y, line)
        line_y -= DESC_LINE_SPACING
    c.drawRightString(right, top - 52, f"{item.calories:g} cal")

    c.setStrokeColor(CARD_EDGE)
    c.line(left, y + 40, right, y + 40)
    c.setFillColor(HexColor("#374151"))
    c.setFont(FONT_BOLD_NAME, 10)
    c.drawString(left, y + 26, "What's Inside?")
    c.setFillColor(MUTED)
    c.setFont(FONT_MED_NAME, 9)
    c.drawString(left, y + 13, "Get full info about this dish: ingredients, nutrition, and more!")

def _page_background(c: canvas.Canvas):
    width, height = letter
    c.setFillColor(PAGE_FILL)
    c.rect(0, 0, width, height, stroke=0, fill=1)

def _draw_list_header(c: canvas.Canvas, count: int, restaurant: Optional[str]) -> float:
    """Returns the y below the header."""
    width, height = letter
    y = height - PAGE_MARGIN
    c.setFillColor(INK)
    c.setFont(FONT_BOLD_NAME, 18)
    c.drawCentredString(width / 2, y - 10, "Scan Results")

    badge = f"We've found {count} meals"
    bw = _string_width(badge, FONT_BOLD_NAME, 13) + 40
    c.setFillColor(ACCENT)
    c.roundRect((width - bw) / 2, y - 52, bw, 28, 14, stroke=0, fill=1)
    c.setFillColor(HexColor("#FFFFFF"))
    c.setFont(FONT_BOLD_NAME, 13)
    c.drawCentredString(width / 2, y - 42, badge)

    c.setFillColor(MUTED)
    c.setFont(FONT_MED_NAME, 11)
    line_y = y - 72
    if restaurant:
        c.drawCentredString(width / 2, line_y, f"on the menu at {restaurant}")
        line_y -= 16
    c.drawCentredString(width / 2, line_y, "Want to know more? Just tap to see details!")
    return line_y - 24

# ========= DETAIL =========
def draw_detail_page(c: canvas.Canvas, item: MenuItem):
    width, height = letter
    _page_background(c)
    left = PAGE_MARGIN
    right = width - PAGE_MARGIN
    y = height - PAGE_MARGIN

    c.setFillColor(INK)
    c.setFont(FONT_BOLD_NAME, 26)
    c.drawString(left, y - 24, item.name)
    c.setFillColor(HexColor("#7ECDC7"))
    c.setFont(FONT_BOLD_NAME, 18)
    c.drawString(left, y - 50, f"${item.price:.2f}")

    spec = render_ring_chart(item.quantities(), _chart_config(DETAIL_CHART_SIZE, DETAIL_CHART_STROKE))
    draw_ring(c, spec, right - DETAIL_CHART_SIZE, y - 20 - DETAIL_CHART_SIZE)
    y -= 40 + DETAIL_CHART_SIZE

    c.setFillColor(HexColor("#334155"))
    c.setFont(FONT_BOLD_NAME, 16)
    c.drawString(left, y, "Description")
    y -= 20
    c.setFillColor(HexColor("#5A6770"))
    c.setFont(FONT_MED_NAME, 12)
    for line in _wrap_text_by_words(item.description or "No description available.", FONT_MED_NAME, 12, right - left):
        c.drawString(left, y, line)
        y -= 16
    y -= 16

    c.setFillColor(HexColor("#334155"))
    c.setFont(FONT_BOLD_NAME, 16)
    c.drawString(left, y, "Nutrition Facts")
    y -= 22
    for label, value, sub in SAMPLE_NUTRITION_FACTS.rows(calories=item.calories):
        font = FONT_BOLD_NAME if label == "Calories" else FONT_MED_NAME
        c.setFont(font, 12)
        c.setFillColor(HexColor("#5A6770"))
        c.drawString(left + (20 if sub else 0), y, label)
        c.setFillColor(INK)
        c.drawRightString(right, y, value)
        y -= 18 if not sub else 15

    y -= 16
    c.setFillColor(WARN_FILL)
    c.rect(left, y - 14, right - left, 34, stroke=0, fill=1)
    c.setFillColor(HexColor("#F59E0B"))
    c.rect(left, y - 14, 5, 34, stroke=0, fill=1)
    c.setFillColor(WARN_INK)
    c.setFont(FONT_MED_NAME, 12)
    c.drawString(left + 16, y, SAMPLE_ALLERGEN_NOTE)
    c.showPage()

# ========= DOCUMENT =========
def build_menu_pdf(
    items: Sequence[MenuItem],
    out_path: Optional[Path] = None,
    restaurant: Optional[str] = "Your Restaurant",
) -> bytes:
    width, height = letter
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.setTitle("Scan Results")

    _page_background(c)
    y = _draw_list_header(c, len(items), restaurant)
    card_width = width - 2 * PAGE_MARGIN
    if not items:
        c.setFillColor(HexColor("#374151"))
        c.setFont(FONT_BOLD_NAME, 16)
        c.drawCentredString(width / 2, y - 40, "No menu items found.")
        c.setFillColor(MUTED)
        c.setFont(FONT_MED_NAME, 12)
        c.drawCentredString(width / 2, y - 60, "Try scanning again or select a different image.")

    for item in items:
        if y - CARD_HEIGHT < PAGE_MARGIN:
            c.showPage()
            _page_background(c)
            y = height - PAGE_MARGIN
        draw_card(c, item, PAGE_MARGIN, y - CARD_HEIGHT, card_width)
        y -= CARD_HEIGHT + CARD_GAP
    c.showPage()

    for item in items:
        draw_detail_page(c, item)

    c.save()
    data = buf.getvalue()
    if out_path is not None:
        out_path = Path(out_path)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "wb") as f:
            f.write(data)
    return data

# ========= MAIN =========
def main(argv: Optional[List[str]] = None):
    argv = sys.argv[1:] if argv is None else argv
    register_fonts()
    menu = argv[0] if argv else (MENU_PATH if Path(MENU_PATH).exists() else None)
    items = load_menu_items(menu) if menu else list(SAMPLE_MENU_ITEMS)

    outdir = Path(OUTPUT_DIR)
    outdir.mkdir(parents=True, exist_ok=True)
    out_path = outdir / "ScanResults.pdf"
    build_menu_pdf(items, out_path)
    print(f"[OK] {len(items)} item(s) -> {out_path}")
    return out_path

if __name__ == "__main__":
    main()
