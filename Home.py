import streamlit as st

from calcviz.config import PRESETS

# ------------------------------------------------------------
# 1) PAGE CONFIG
# ------------------------------------------------------------
st.set_page_config(
    page_title="Calculus Visualizer",
    page_icon="📈",
    layout="wide"
)

# ------------------------------------------------------------
# 2) STYLE (CSS)
# ------------------------------------------------------------
st.markdown(
    """
<style>
:root {
  --border: rgba(127,127,127,0.25);
  --muted: rgba(127,127,127,0.95);
  --accent: #ef4444;
  --accent2: #3b82f6;
}

.hero-section {
    padding: 3.5rem 2rem;
    background: radial-gradient(circle at top left, rgba(239,68,68,0.10), transparent),
                radial-gradient(circle at bottom right, rgba(59,130,246,0.10), transparent);
    border-radius: 24px;
    border: 1px solid var(--border);
    margin-bottom: 2.5rem;
    text-align: center;
}

.title-text {
    font-size: 3.4rem;
    font-weight: 800;
    letter-spacing: -2px;
    margin-bottom: 0.5rem;
}

.feature-card {
    border: 1px solid var(--border);
    border-radius: 16px;
    padding: 24px;
    height: 100%;
    transition: all 0.3s cubic-bezier(0.4, 0, 0.2, 1);
}

.feature-card:hover {
    border-color: var(--accent);
    transform: translateY(-6px);
}

.card-icon { font-size: 2rem; margin-bottom: 15px; }
.card-title { font-size: 1.2rem; font-weight: 700; margin-bottom: 12px; }

.info-box {
    background: rgba(59,130,246,0.06);
    border-left: 4px solid var(--accent2);
    padding: 20px;
    border-radius: 0 12px 12px 0;
}

.hr {
    border: none;
    border-top: 1px solid var(--border);
    margin: 2.5rem 0;
}

.footer {
    text-align: center;
    color: var(--muted);
    margin-top: 4rem;
    padding-bottom: 3rem;
    font-size: 0.9rem;
}

code { color: var(--accent) !important; }
.badge {
    display: inline-block;
    padding: 2px 10px;
    border-radius: 5px;
    background: rgba(127,127,127,0.15);
    font-size: 0.75rem;
    margin-bottom: 10px;
}
</style>
""",
    unsafe_allow_html=True,
)

# ------------------------------------------------------------
# 3) HERO
# ------------------------------------------------------------
st.markdown(
    """
    <div class="hero-section">
        <div class="badge">MULTIVARIABLE CALCULUS</div>
        <h1 class="title-text">CALCULUS VISUALIZER</h1>
        <p style="color: var(--muted); font-size: 1.2rem; max-width: 780px; margin: 0 auto; line-height: 1.6;">
            Type a function f(x, y), pick a point, and see the surface, its tangent plane,
            the gradient and the contour map side by side.
        </p>
    </div>
    """,
    unsafe_allow_html=True,
)

# ------------------------------------------------------------
# 4) FEATURES
# ------------------------------------------------------------
st.markdown("### 🛠️ What you get")
c1, c2, c3 = st.columns(3)


def feature_card(icon: str, title: str, body: str) -> None:
    st.markdown(
        f"""
        <div class="feature-card">
            <div class="card-icon">{icon}</div>
            <div class="card-title">{title}</div>
            <p style="color: var(--muted); font-size: 0.95rem;">{body}</p>
        </div>
        """, unsafe_allow_html=True
    )


with c1:
    feature_card(
        "🏔️", "Surface & tangent plane",
        "z = f(x, y) on [-5, 5)² with the plane T(x, y) = f₀ + fₓ(x − x₀) + f_y(y − y₀) "
        "and the gradient indicator at the chosen point.",
    )

with c2:
    feature_card(
        "🧭", "Contours & gradient field",
        "A heatmap-colored contour map with the field ∇f drawn as short arrows "
        "on a coarser grid.",
    )

with c3:
    feature_card(
        "🧬", "Symbolic & numeric",
        "SymPy parses and differentiates; NumPy evaluates. Partial derivatives are "
        "shown in LaTeX next to their values at the point.",
    )

st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

# ------------------------------------------------------------
# 5) PRESETS AND SYNTAX
# ------------------------------------------------------------
col_presets, col_syntax = st.columns([1, 1], gap="large")

with col_presets:
    st.markdown("### 🚀 Try these")
    st.markdown("\n".join(f"- **{label}:** `{expr}`" for label, expr in PRESETS.items()))

with col_syntax:
    st.markdown("### ⌨️ Syntax guide")
    st.markdown("Functions of **x** and **y** only:")
    st.code("""
# Power: x^2 or x**2
# Constants: pi, e
# Functions: exp(x), log(x), sin(x), cos(x), tan(x)
# Square root: sqrt(x)
# Absolute value: abs(x)
    """, language="python")

st.markdown("<div class='hr'></div>", unsafe_allow_html=True)

st.markdown(
    """
    <div class="info-box">
        <strong>Domain note:</strong> f and both partials must be defined on every grid
        point of [-5, 5)². Functions like <code>1/x</code> or <code>log(x)</code> are
        rejected with the point where evaluation failed.
    </div>
    """, unsafe_allow_html=True
)

# ------------------------------------------------------------
# 6) FOOTER
# ------------------------------------------------------------
st.markdown(
    """
    <div class='footer'>
        <strong>Calculus Visualizer</strong> · Streamlit · Plotly · SymPy · NumPy
    </div>
    """,
    unsafe_allow_html=True
)

st.sidebar.title("Navigation")
st.sidebar.info("Open **Calculus Visualizer** from the menu above to start plotting.")
