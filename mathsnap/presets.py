"""Built-in example equations offered next to manual entry.

Each preset is a ``(label, equation)`` pair. Equations use the same
calculator notation as recognition output, so ``y = ...`` presets can be
passed straight to :class:`mathsnap.curve_sampler.CurveSampler`.
"""

from __future__ import annotations

BASIC_FUNCTIONS: tuple[tuple[str, str], ...] = (
    ("Linear", "y = 2x + 3"),
    ("Quadratic", "y = x^2 - 4"),
    ("Cubic", "y = x^3"),
    ("Simple Equation", "2x + 3 = 15"),
)

COMPLEX_FUNCTIONS: tuple[tuple[str, str], ...] = (
    ("Sine", "y = sin(x)"),
    ("Tangent", "y = tan(x)"),
    ("Exponential", "y = e^x"),
    ("Square Root", "y = sqrt(x)"),
    ("Logarithmic", "y = log(x)"),
    ("Quadratic Formula", "y = x^2 + 5x + 6"),
)


def all_presets() -> dict[str, str]:
    """Return every preset as ``{label: equation}``, basic ones first."""
    return dict(BASIC_FUNCTIONS + COMPLEX_FUNCTIONS)


__all__ = ["BASIC_FUNCTIONS", "COMPLEX_FUNCTIONS", "all_presets"]
