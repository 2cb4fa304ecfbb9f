#!/usr/bin/env python3
"""
Streamlit UI for the menu scanner flow:
  welcome → capture (camera / upload / sample) → scan results list → dish detail

Every dish card shows a macro ring chart (fat / protein / carbs) rendered by
ring_chart.py + donut.py. The captured photo is only displayed; the menu
itself comes from the sample data or an uploaded CSV/Excel menu table.
The sidebar offers the cards PDF (build_menu_cards.py) and a ZIP of the
per-dish SVG charts.
"""
from __future__ import annotations
import io
import tempfile
import traceback
import zipfile
from pathlib import Path
from typing import List

import streamlit as st

from build_menu_cards import build_menu_pdf
from donut import chart_config, ring_svg_string, unique_slugs
from menu_data import (
    SAMPLE_ALLERGEN_NOTE,
    SAMPLE_MENU_ITEMS,
    SAMPLE_NUTRITION_FACTS,
    MenuItem,
    find_item,
    load_menu_items,
    tag_tone,
)
from ring_chart import InvalidInput, render_ring_chart

# ----------------------------
# Project layout & constants
# ----------------------------
HERE = Path(__file__).resolve().parent

SCREENS = ("welcome", "capture", "list", "detail")
RESTAURANT_NAME = "Your Restaurant"
LIST_CHART_SIZE = 64
LIST_CHART_STROKE = 7
DETAIL_CHART_SIZE = 180
DETAIL_CHART_STROKE = 18

# ----------------------------
# Helpers
# ----------------------------

def log(msg: str) -> None:
    st.session_state.setdefault("log", [])
    st.session_state.log.append(msg)


def reset_log() -> None:
    st.session_state["log"] = []


def go(screen: str, **state) -> None:
    if screen not in SCREENS:
        raise ValueError(f"Unknown screen '{screen}'")
    st.session_state["screen"] = screen
    for k, v in state.items():
        st.session_state[k] = v


def current_items() -> List[MenuItem]:
    items = st.session_state.get("items")
    return list(SAMPLE_MENU_ITEMS) if items is None else items


def chart_markup(item: MenuItem, size: float, stroke_width: float) -> str:
    spec = render_ring_chart(item.quantities(), chart_config(size, stroke_width))
    return ring_svg_string(spec)


def charts_zip_bytes(items: List[MenuItem], size: float = LIST_CHART_SIZE, stroke_width: float = LIST_CHART_STROKE) -> bytes:
    """All ring charts as <slug>.svg entries in one in-memory ZIP."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as z:
        for item, name in zip(items, unique_slugs(i.name for i in items)):
            z.writestr(f"{name}.svg", chart_markup(item, size, stroke_width))
    return buf.getvalue()


def load_uploaded_menu(uploaded) -> List[MenuItem]:
    suffix = Path(uploaded.name).suffix.lower()
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / f"menu{suffix}"
        with open(path, "wb") as f:
            f.write(uploaded.getvalue())
        return load_menu_items(path)


def tag_html(tags) -> str:
    chips = [
        f'<span style="background:{tag_tone(t)};color:#fff;border-radius:12px;'
        f'padding:2px 10px;margin-right:6px;font-size:11px;font-weight:600">{t}</span>'
        for t in tags
    ]
    return "".join(chips)

# ----------------------------
# Screens
# ----------------------------

def welcome_screen() -> None:
    st.title("Hey! Foodie")
    st.subheader("Let's find your favorite food.")
    if st.button("Start", type="primary", use_container_width=True):
        go("capture")
        st.rerun()


def capture_screen() -> None:
    st.title("Menu Analyzer")
    st.caption("How would you like to add a menu?")

    shot = st.camera_input("Scan with Camera")
    picked = st.file_uploader("Select from Gallery", type=["png", "jpg", "jpeg"], accept_multiple_files=False)
    st.button("Enter Manually (Soon)", disabled=True, use_container_width=True)

    image = shot or picked
    # widgets keep their value across reruns; only a new capture moves on
    if image is not None and st.session_state.get("capture_id") != (image.name, image.size):
        log(f"Captured menu image: {image.name}")
        go("list", image=image.getvalue(), capture_id=(image.name, image.size))
        st.rerun()

    cols = st.columns(2)
    with cols[0]:
        if st.button("Try with Sample Menu", use_container_width=True):
            go("list", image=None)
            st.rerun()
    with cols[1]:
        if st.button("Back", use_container_width=True):
            go("welcome")
            st.rerun()


def list_screen() -> None:
    items = current_items()
    if st.button("← Back"):
        go("capture")
        st.rerun()
    st.title("Scan Results")

    if not items:
        st.warning("No menu items found.")
        st.caption("Try scanning again or select a different image.")
        return

    st.success(f"We've found {len(items)} meals")
    st.caption(f"on the menu at {RESTAURANT_NAME} 🌮 · Want to know more? Just tap to see details!")
    if st.session_state.get("image"):
        with st.expander("Scanned menu"):
            st.image(st.session_state["image"])

    for item in items:
        with st.container(border=True):
            chart_col, text_col = st.columns([1, 4])
            with chart_col:
                try:
                    st.markdown(chart_markup(item, LIST_CHART_SIZE, LIST_CHART_STROKE), unsafe_allow_html=True)
                except InvalidInput as e:
                    st.caption(f"No chart: {e}")
                    log(f"⚠️ {item.name}: {e}")
            with text_col:
                st.markdown(tag_html(item.tags), unsafe_allow_html=True)
                st.markdown(f"**{item.name}** · \\${item.price:.2f}")
                st.caption(f"{item.description} · {item.calories:g} cal")
                if st.button("What's Inside?", key=f"detail-{item.id}"):
                    go("detail", item_id=item.id)
                    st.rerun()


def detail_screen() -> None:
    item = find_item(current_items(), st.session_state.get("item_id", ""))
    if st.button("← Back"):
        go("list")
        st.rerun()
    if item is None:
        st.error("That dish is no longer on the menu.")
        return

    st.title(item.name)
    st.subheader(f"${item.price:.2f}")
    try:
        st.markdown(chart_markup(item, DETAIL_CHART_SIZE, DETAIL_CHART_STROKE), unsafe_allow_html=True)
    except InvalidInput as e:
        st.error(f"Cannot draw macros: {e}")

    st.markdown("#### Description")
    st.write(item.description or "No description available.")

    st.markdown("#### Nutrition Facts")
    for label, value, sub in SAMPLE_NUTRITION_FACTS.rows(calories=item.calories):
        left, right = st.columns([3, 1])
        text = f"&nbsp;&nbsp;&nbsp;&nbsp;{label}" if sub else (f"**{label}**" if label == "Calories" else label)
        left.markdown(text)
        right.markdown(f"**{value}**" if label == "Calories" else value)

    st.warning(SAMPLE_ALLERGEN_NOTE)

# ----------------------------
# Streamlit UI
# ----------------------------

def sidebar() -> None:
    with st.sidebar:
        st.header("Menu")
        uploaded = st.file_uploader("Menu table (.csv / .xlsx)", type=["csv", "xlsx"], accept_multiple_files=False)
        if uploaded is not None and st.session_state.get("menu_file") != uploaded.name:
            try:
                st.session_state["items"] = load_uploaded_menu(uploaded)
                st.session_state["menu_file"] = uploaded.name
                log(f"✅ Loaded {len(st.session_state['items'])} item(s) from {uploaded.name}")
            except Exception as e:
                st.error("Could not read that menu. See log below.")
                log(f"❌ {uploaded.name}: {e}\n{traceback.format_exc()}")
        if st.button("Use sample menu"):
            st.session_state["items"] = None
            log("Using the built-in sample menu.")

        st.divider()
        items = current_items()
        try:
            st.download_button(
                "Download cards (PDF)",
                data=build_menu_pdf(items, restaurant=RESTAURANT_NAME),
                file_name="ScanResults.pdf",
                mime="application/pdf",
                use_container_width=True,
            )
            st.download_button(
                "Download ring charts (ZIP)",
                data=charts_zip_bytes(items),
                file_name="RingCharts.zip",
                mime="application/zip",
                use_container_width=True,
            )
        except InvalidInput as e:
            st.error(f"Exports unavailable: {e}")
            log(f"❌ Export failed: {e}")

        st.write("### Log")
        st.code("\n".join(st.session_state.log) or "Ready.", language="text")


def main() -> None:
    st.set_page_config(page_title="Menu Analyzer", page_icon="🥗", layout="centered")
    if "log" not in st.session_state:
        reset_log()
    st.session_state.setdefault("screen", "welcome")

    screen = st.session_state["screen"]
    if screen == "welcome":
        welcome_screen()
    elif screen == "capture":
        capture_screen()
    elif screen == "list":
        list_screen()
    else:
        detail_screen()

    sidebar()


if __name__ == "__main__":
    main()
