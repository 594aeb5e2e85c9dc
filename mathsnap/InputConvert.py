# === SECTION: InputConvert [id: InputConvert]===
from __future__ import annotations

import math
from typing import Any, Optional, Type, TypeVar

import sympy as sp

T = TypeVar("T", int, float)


def InputConvert(
    obj: Any,
    dest_type: Type[T] = float,
    *,
    name: Optional[str] = None,
    allow_nonfinite: bool = False,
) -> T:
    """
    Convert a configuration value `obj` to a real `dest_type`.

    Supported destination types:
    - float
    - int (the value must be an exact integer)

    Rules:
    - If `obj` is a number: cast via dest_type(obj).
    - If `obj` is a string:
        1) try float(s)
        2) else parse as a SymPy expression (``"pi"``, ``"34*12"``, ``"1/10"``)
           and evaluate numerically.

    Parameters
    ----------
    name:
        Field name used in error messages (``"step"``, ``"min_scale"``...).
    allow_nonfinite:
        If False (default), ``nan`` and ``inf`` are rejected.

    Raises
    ------
    NotImplementedError
        If dest_type is unsupported.
    ValueError
        If conversion fails, the value is complex, or it is not finite.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )
    label = name or "value"

    def _finish(value: float) -> T:
        if not allow_nonfinite and not math.isfinite(value):
            raise ValueError(f"{label} must be finite, got {obj!r}.")
        if dest_type is float:
            return float(value)  # type: ignore[return-value]
        if not float(value).is_integer():
            raise ValueError(f"{label} must be an exact integer, got {obj!r}.")
        return int(value)  # type: ignore[return-value]

    # Fast path: numeric types (exclude bool)
    if isinstance(obj, (int, float)) and not isinstance(obj, bool):
        return _finish(float(obj))

    if isinstance(obj, str):
        s = obj.strip()
        if s == "":
            raise ValueError(f"Cannot convert empty string to {dest_type.__name__} for {label}.")

        try:
            direct = float(s)
        except ValueError:
            pass
        else:
            return _finish(direct)

        try:
            expr = sp.sympify(s)
            val = complex(expr.evalf())
        except Exception as e:
            raise ValueError(
                f"Could not convert {obj!r} to {dest_type.__name__} for {label} "
                "(neither directly nor via SymPy)."
            ) from e
        if val.imag != 0:
            raise ValueError(f"{label} must be real, got {obj!r}.")
        return _finish(val.real)

    # numpy scalars, sympy numbers, Fractions...
    try:
        val = complex(obj)
    except Exception as e:
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__} for {label}.") from e
    if val.imag != 0:
        raise ValueError(f"{label} must be real, got {obj!r}.")
    return _finish(val.real)

# === END OF SECTION: InputConvert [id: InputConvert]===
