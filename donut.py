# donut.py
# Macro ring chart (SVG): background track, one stroked arc per macro, dominant label in the middle.
# Draws a ring_chart.RenderSpec; produces ONE chart per menu item when run as a script.
# Requires: pip install svgwrite pandas openpyxl  (optional: cairosvg if rsvg-convert not available)

import os
import shutil
import tomllib
from pathlib import Path
from typing import List, Optional, Tuple

import svgwrite

from menu_data import SAMPLE_MENU_ITEMS, MenuItem, load_menu_items
from ring_chart import ChartConfig, RenderSpec, render_ring_chart

# --- anchor everything to this file's folder ---
HERE = Path(__file__).parent

def _load_cfg() -> dict:
    cfg_path = HERE / "Configs" / "config.toml"
    if cfg_path.exists():
        with open(cfg_path, "rb") as f:
            return tomllib.load(f)
    return {}

_CFG = _load_cfg()

# Read defaults from config, but keep sane fallbacks
MENU_PATH = str(HERE / _CFG.get("paths", {}).get("menu", "Configs/sample_menu.csv"))
CHART_DIR = str(HERE / _CFG.get("paths", {}).get("chart_dir", "charts"))

FONT_FAMILY = _CFG.get("fonts", {}).get("family", "Helvetica, Arial, sans-serif")


def chart_config(size: Optional[float] = None, stroke_width: Optional[float] = None) -> ChartConfig:
    """[chart] section of config.toml as a ChartConfig, with optional size overrides."""
    section = dict({"size": 64, "stroke_width": 7}, **_CFG.get("chart", {}))
    if size is not None:
        section["size"] = size
    if stroke_width is not None:
        section["stroke_width"] = stroke_width
    return ChartConfig.from_mapping(section)

# =======================
# Geometry helpers
# =======================
def _ring_path(c: float, r: float) -> str:
    """
    Full circle as two half-arcs, starting at 3 o'clock and running clockwise.
    A single 360° SVG arc is degenerate, hence the split.
    """
    return " ".join([
        f"M {c + r:.3f},{c:.3f}",
        f"A {r:.3f},{r:.3f} 0 1 1 {c - r:.3f},{c:.3f}",
        f"A {r:.3f},{r:.3f} 0 1 1 {c + r:.3f},{c:.3f}",
    ])

# =======================
# Renderer
# =======================
def ring_svg(spec: RenderSpec, svg_path: Optional[str] = None, font_family: str = FONT_FAMILY) -> svgwrite.Drawing:
    size = spec.size
    c = spec.track.center
    r = spec.track.radius
    circumference = spec.circumference
    d = _ring_path(c, r)

    dwg = svgwrite.Drawing(svg_path or "ring.svg", size=(size, size), profile="full")
    dwg.attribs["viewBox"] = f"0 0 {size:g} {size:g}"

    # whole ring turned once so that 0° sits at the top
    ring = dwg.g(transform=f"rotate({spec.rotation_offset:g} {c:.3f} {c:.3f})")
    ring.add(dwg.path(
        d=d,
        fill="none",
        stroke=spec.track.color,
        stroke_width=spec.track.stroke_width,
    ))
    for seg in spec.segments:
        ring.add(dwg.path(
            d=d,
            fill="none",
            stroke=seg.color,
            stroke_width=spec.stroke_width,
            stroke_dasharray=f"{circumference:.3f} {circumference:.3f}",
            stroke_dashoffset=f"{seg.dash_offset(circumference):.3f}",
            stroke_linecap=spec.line_cap,
            transform=f"rotate({seg.rotation_degrees:.3f} {c:.3f} {c:.3f})",
            class_=f"segment {seg.category.value}",
        ))
    dwg.add(ring)

    # label stays upright, outside the rotated group
    if spec.label is not None:
        dwg.add(dwg.text(
            spec.label.text,
            insert=(c, c),
            fill=spec.label_color,
            font_family=font_family,
            font_size=f"{spec.label_font_size:.2f}",
            font_weight="bold",
            text_anchor="middle",
            dominant_baseline="central",
        ))
    return dwg


def ring_svg_string(spec: RenderSpec, font_family: str = FONT_FAMILY) -> str:
    return ring_svg(spec, font_family=font_family).tostring()

# =======================
# Files + IO
# =======================
def _safe_slug(text: str) -> str:
    s = "".join(ch if ch.isalnum() else "_" for ch in str(text).strip())
    while "__" in s:
        s = s.replace("__", "_")
    return s.strip("_") or "chart"

def unique_slugs(names) -> List[str]:
    """Slug per name; repeats get _2, _3, ... so files never overwrite each other."""
    seen = {}
    out = []
    for name in names:
        base = _safe_slug(name)
        seen[base] = seen.get(base, 0) + 1
        out.append(base if seen[base] == 1 else f"{base}_{seen[base]}")
    return out

def to_png(svg_path: str, png_path: str) -> Optional[str]:
    """Convert SVG → PNG. Prefer rsvg-convert; fallback to cairosvg if installed."""
    rsvg = shutil.which("rsvg-convert")
    if rsvg:
        os.system(f'"{rsvg}" "{svg_path}" -a -f png -o "{png_path}"')
        return png_path if os.path.exists(png_path) else None
    try:
        import cairosvg  # type: ignore
        cairosvg.svg2png(url=svg_path, write_to=png_path)
        return png_path
    except Exception as exc:
        print(f"[warn] PNG not created for {svg_path}: {exc}")
        return None

# =======================
# Menu → multiple charts
# =======================
def generate_menu_donuts(
    menu_path: Optional[str] = None,
    out_dir: str = CHART_DIR,
    *,
    items: Optional[List[MenuItem]] = None,
    config: Optional[ChartConfig] = None,
    png: bool = False,
) -> List[Tuple[str, str, Optional[str]]]:
    """
    Write <slug>.svg (and optionally .png) for every menu item.
    Source order: explicit `items`, else `menu_path`, else the built-in sample menu.
    """
    Path(out_dir).mkdir(parents=True, exist_ok=True)
    if items is None:
        items = load_menu_items(menu_path) if menu_path else list(SAMPLE_MENU_ITEMS)
    config = config or chart_config()

    emitted: List[Tuple[str, str, Optional[str]]] = []
    for item, base in zip(items, unique_slugs(i.name for i in items)):
        spec = render_ring_chart(item.quantities(), config)
        svg_path = os.path.join(out_dir, f"{base}.svg")
        ring_svg(spec, svg_path).save()

        png_path = None
        if png:
            png_path = to_png(svg_path, os.path.join(out_dir, f"{base}.png"))
        emitted.append((item.name, svg_path, png_path))

    return emitted

if __name__ == "__main__":
    menu = MENU_PATH if os.path.exists(MENU_PATH) else None
    results = generate_menu_donuts(menu, CHART_DIR, png=True)
    print(f"Emitted {len(results)} charts to '{CHART_DIR}'")
    for name, svg, png_file in results:
        print(f"- {name}: {os.path.basename(svg)}  |  {os.path.basename(png_file) if png_file else '-'}")
