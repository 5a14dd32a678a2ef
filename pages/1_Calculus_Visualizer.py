# Calculus Visualizer: surface, tangent plane, gradient, contours (Streamlit + Plotly)
# -----------------------------------------------------------------------------
# - f(x, y) parsed and differentiated with SymPy, evaluated with NumPy
# - 3D view: surface + tangent plane + point + gradient indicator
# - 2D view: contour map + gradient vector field
# - Presets sync into the function field (selectbox -> text_input via session_state)
# - Theme preference persisted between sessions

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from calcviz.assembler import Visibility, format_number
from calcviz.cache import PlotCache
from calcviz.config import DEFAULT_POINT, POINT_BOUNDS, PRESETS, Settings, setup_logging
from calcviz.content import ABOUT, HELP, SHORTCUTS
from calcviz.controller import PlotController, PlotRequest, VisualizerSession, error_boundary
from calcviz.errors import ErrorKind, Notice
from calcviz.expression import compile_expression
from calcviz.render import StreamlitRenderer, build_figure_2d, build_figure_3d, figure_html
from calcviz.theme import PreferenceStore, palette_for


# ----------------------------
# 0) PAGE CONFIG (MUST BE FIRST)
# ----------------------------
st.set_page_config(page_title="Calculus Visualizer", page_icon="📈", layout="wide")

SETTINGS = Settings.from_env()
setup_logging(SETTINGS.log_level)
logger = logging.getLogger("calcviz.page")

TOGGLES = {
    "surface": "Surface",
    "tangent_plane": "Tangent plane",
    "gradient": "Gradient",
    "contour": "Contour",
    "vectors": "Vector field",
}


def _toast_notice(notice: Notice) -> None:
    st.toast(notice.describe(), icon="🚨")


# ----------------------------
# 1) CACHED PARSING
# ----------------------------
@st.cache_resource(show_spinner=False)
def cached_compile(text: str):
    return compile_expression(text)


# ----------------------------
# 2) SESSION
# ----------------------------
def _initial_dark(store: PreferenceStore) -> bool:
    stored = store.load_theme()
    if stored is not None:
        return stored == "dark"
    return st.get_option("theme.base") == "dark"


def _init_state() -> None:
    if "viz_controller" in st.session_state:
        return

    store = PreferenceStore(SETTINGS.preferences_path)
    session = VisualizerSession(
        dark=_initial_dark(store),
        cache=PlotCache(max_entries=SETTINGS.cache_max_entries),
    )
    st.session_state.viz_controller = PlotController(
        session,
        StreamlitRenderer({}),
        compile=cached_compile,
        store=store,
    )

    labels = list(PRESETS.keys())
    st.session_state.preset = labels[0]
    st.session_state.expr = session.expression
    st.session_state.x0, st.session_state.y0 = session.x0, session.y0
    st.session_state.dark = session.dark
    for name in TOGGLES:
        st.session_state[f"show_{name}"] = getattr(session.visibility, name)


_init_state()
controller: PlotController = st.session_state.viz_controller


# ----------------------------
# 3) CALLBACKS
# ----------------------------
def _apply_preset() -> None:
    req = controller.select_preset(st.session_state.preset)
    st.session_state.expr = req.expression


def _reset_view() -> None:
    req = controller.reset()
    st.session_state.x0, st.session_state.y0 = req.x0, req.y0
    for name in TOGGLES:
        st.session_state[f"show_{name}"] = getattr(req.visibility, name)


def _apply_theme() -> None:
    controller.set_theme(st.session_state.dark)


# ----------------------------
# 4) STYLE
# ----------------------------
pal = palette_for(st.session_state.dark)
st.markdown(
    f"""
<style>
:root {{
  --border: {pal.card_border};
  --muted: {pal.muted_text};
  --accent: {pal.point_color};
}}

div[data-testid="stMetric"]{{
  background: {pal.card_background};
  border: 1px solid var(--border);
  border-radius: 14px;
  padding: 14px;
}}

.hr {{
  border: none;
  border-top: 1px solid var(--border);
  margin: 0.75rem 0 1.0rem 0;
}}

.small-muted {{ color: var(--muted); font-size: 0.92rem; }}
.badge {{
  display:inline-block; padding: 0.18rem 0.55rem; border-radius: 999px;
  background: {pal.card_background}; border: 1px solid var(--border);
  color: var(--muted); font-size: 0.82rem;
}}
.footer {{ text-align:center; color: var(--muted); margin-top: 14px; font-size: 0.85rem; }}
.codebox {{
  background: {pal.card_background};
  border: 1px solid var(--border);
  border-radius: 14px;
  padding: 12px 14px;
}}
</style>
""",
    unsafe_allow_html=True,
)


# ----------------------------
# 5) DIALOGS
# ----------------------------
@st.dialog("About Calculus Visualizer")
def about_dialog():
    st.markdown(ABOUT)


@st.dialog("How to use", width="large")
def help_dialog():
    st.markdown(HELP)


@st.dialog("Keyboard shortcuts")
def shortcuts_dialog():
    st.markdown(SHORTCUTS)


# ----------------------------
# 6) SIDEBAR
# ----------------------------
st.sidebar.header("Function")
st.sidebar.selectbox("Presets", list(PRESETS.keys()), key="preset", on_change=_apply_preset)
st.sidebar.text_input("f(x, y)", key="expr", help="Press Enter to apply. `^` means power.")

st.sidebar.markdown("---")
st.sidebar.subheader("Point (x₀, y₀)")
st.sidebar.slider("x₀", POINT_BOUNDS["min"], POINT_BOUNDS["max"], step=POINT_BOUNDS["step"], key="x0")
st.sidebar.slider("y₀", POINT_BOUNDS["min"], POINT_BOUNDS["max"], step=POINT_BOUNDS["step"], key="y0")

st.sidebar.markdown("---")
st.sidebar.subheader("Show")
for name, label in TOGGLES.items():
    st.sidebar.checkbox(label, key=f"show_{name}")

st.sidebar.markdown("---")
st.sidebar.toggle("Dark theme", key="dark", on_change=_apply_theme)
st.sidebar.button(
    "Reset view",
    on_click=_reset_view,
    use_container_width=True,
    help=f"Point back to {DEFAULT_POINT} and every series visible.",
)

b1, b2, b3 = st.sidebar.columns(3)
if b1.button("About", use_container_width=True):
    about_dialog()
if b2.button("Help", use_container_width=True):
    help_dialog()
if b3.button("Keys", use_container_width=True):
    shortcuts_dialog()


# ----------------------------
# 7) HEADER + LAYOUT
# ----------------------------
st.title("📈 Calculus Visualizer")
st.markdown(
    "<span class='badge'>Surface</span> "
    "<span class='badge'>Tangent plane</span> "
    "<span class='badge'>Gradient</span> "
    "<span class='badge'>Contours</span>",
    unsafe_allow_html=True,
)

notice_area = st.container()
metrics_area = st.container()
st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

tab_view, tab_diag = st.tabs(["Plots", "Diagnostics"])
with tab_view:
    col3d, col2d = st.columns(2)
    slots = {"plot3d": col3d.empty(), "plot2d": col2d.empty()}
    downloads = st.container()

controller.renderer = StreamlitRenderer(slots)


# ----------------------------
# 8) PLOT
# ----------------------------
request = PlotRequest(
    expression=st.session_state.expr,
    x0=st.session_state.x0,
    y0=st.session_state.y0,
    dark=st.session_state.dark,
    visibility=Visibility(**{name: st.session_state[f"show_{name}"] for name in TOGGLES}),
)

with error_boundary(_toast_notice):
    outcome = controller.plot(request)
    if outcome.notice is not None:
        st.toast(outcome.notice.describe(), icon="⚠️")
        if outcome.notice.kind in (ErrorKind.VALIDATION, ErrorKind.EVALUATION):
            notice_area.error(outcome.notice.describe())
            if controller.session.last_good is not None:
                notice_area.caption(f"Still showing the last valid function: `{controller.session.expression}`")


# ----------------------------
# 9) METRICS STRIP
# ----------------------------
def metrics_strip(session: VisualizerSession) -> None:
    derived = session.last_derived
    if derived is None:
        st.info("Enter a valid function to see its derivatives.")
        return

    shown = derived.formatted()
    point = f"({format_number(session.x0)}, {format_number(session.y0)})"
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("f(x₀, y₀)", shown["f(x0, y0)"], point, delta_color="off")
    m2.metric("∂f/∂x", shown["∂f/∂x"], f"fₓ = {derived.fx_text}", delta_color="off")
    m3.metric("∂f/∂y", shown["∂f/∂y"], f"f_y = {derived.fy_text}", delta_color="off")
    m4.metric("|∇f|", shown["|∇f|"], f"∇f = ({shown['∂f/∂x']}, {shown['∂f/∂y']})", delta_color="off")


# ----------------------------
# 10) DOWNLOADS
# ----------------------------
def download_buttons(session: VisualizerSession) -> None:
    if session.last_good is None:
        return

    d1, d2 = st.columns(2)
    d1.download_button(
        "Download 3D view (HTML)",
        data=figure_html(build_figure_3d(session.last_good)),
        file_name="calculus_3d.html",
        mime="text/html",
        use_container_width=True,
    )
    d2.download_button(
        "Download 2D view (HTML)",
        data=figure_html(build_figure_2d(session.last_good)),
        file_name="calculus_2d.html",
        mime="text/html",
        use_container_width=True,
    )
    st.markdown(
        "<div class='small-muted'>PNG export (800×600): use the camera icon on each chart.</div>",
        unsafe_allow_html=True,
    )


# ----------------------------
# 11) DIAGNOSTICS
# ----------------------------
def diagnostics_panel(session: VisualizerSession) -> None:
    derived = session.last_derived
    if derived is None or session.last_good is None:
        st.info("Nothing plotted yet.")
        return

    left, right = st.columns([1.15, 1.0])

    with left:
        st.markdown("### 🔎 Symbolic summary")
        parsed = cached_compile(session.expression)
        st.latex(f"f(x,y) = {parsed.to_latex()}")
        st.latex(rf"\frac{{\partial f}}{{\partial x}} = {derived.fx_latex}")
        st.latex(rf"\frac{{\partial f}}{{\partial y}} = {derived.fy_latex}")
        d = session.last_good.sample.derivatives
        st.latex(
            rf"T(x,y) = {format_number(d.f0)} + {format_number(d.fx0)}\,(x - {format_number(d.x0)})"
            rf" + {format_number(d.fy0)}\,(y - {format_number(d.y0)})"
        )

    with right:
        st.markdown("### 📋 Values at the point")
        shown = derived.formatted()
        table = pd.DataFrame(
            [
                {"quantity": "f(x₀, y₀)", "value": derived.f0, "shown": shown["f(x0, y0)"]},
                {"quantity": "∂f/∂x", "value": derived.fx0, "shown": shown["∂f/∂x"]},
                {"quantity": "∂f/∂y", "value": derived.fy0, "shown": shown["∂f/∂y"]},
                {"quantity": "|∇f|", "value": derived.gradient_magnitude, "shown": shown["|∇f|"]},
            ]
        )
        st.dataframe(table, use_container_width=True, hide_index=True)

        cache = session.cache
        st.markdown(
            f"<div class='codebox'><span class='small-muted'>cache entries:</span> {len(cache)}"
            f" &nbsp;·&nbsp; <span class='small-muted'>hits:</span> {cache.hits}"
            f" &nbsp;·&nbsp; <span class='small-muted'>misses:</span> {cache.misses}</div>",
            unsafe_allow_html=True,
        )


with metrics_area, error_boundary(_toast_notice):
    metrics_strip(controller.session)

with downloads, error_boundary(_toast_notice):
    download_buttons(controller.session)

with tab_diag, error_boundary(_toast_notice):
    diagnostics_panel(controller.session)

st.markdown(
    "<div class='footer'>Calculus Visualizer · grid [-5, 5)² · surface step 0.25 · field step 0.5</div>",
    unsafe_allow_html=True,
)
