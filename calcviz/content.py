"""Markdown bodies for the About, Help and Shortcuts dialogs."""

from .config import PRESETS

ABOUT = """
This interactive tool helps visualize multivariable calculus concepts:

- 3D surface plots
- Tangent planes
- Gradient fields
- Contour plots
- Partial derivatives

Built with **Streamlit**, **Plotly**, **SymPy** and **NumPy**.
"""


def _preset_lines() -> str:
    return "\n".join(f"- `{expr}`  {label}" for label, expr in PRESETS.items())


HELP = f"""
### Function input
Enter f(x, y) using standard notation. `^` and `**` both mean power.

{_preset_lines()}

Available functions: `sin cos tan asin acos atan sinh cosh tanh exp log ln sqrt abs sign`,
constants `pi` and `e`.

### Controls
- Use the sliders to move the point (x₀, y₀).
- Toggle plot elements on and off in the sidebar.
- Download a PNG (800×600) with the camera icon on each chart, or the HTML below the charts.
- Switch between light and dark themes. The choice is remembered.

### When something is wrong
- **Invalid function**: the text does not parse, uses variables other than x and y,
  or calls an unknown function.
- **Evaluation failed**: f or a partial derivative is undefined somewhere on the
  grid [-5, 5)², e.g. `1/x` at x = 0 or `log(x)` for x ≤ 0.

The previous plot stays on screen until a valid function is entered.
"""

SHORTCUTS = """
| Key | Action |
|---|---|
| `Enter` (in the function field) | Apply the function and plot |
| `R` | Rerun the page with the current inputs |
| `Esc` | Close this dialog |

Reset the point and the visibility toggles with the **Reset view** button in the sidebar.
"""
