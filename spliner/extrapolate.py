"""Extrapolation beyond the key points of a spline.

Two things are decided here: how far beyond the key points a spline may be
evaluated (the extrapolation range), and how values are continued there (the
extrapolation method).

The `extrapolate` option takes one of four forms, each resolved to a closed
interval `(lo, hi)` by `extrapolation_range`:

    - None: no extrapolation; the range is that of the key points.
    - A percentage string such as `"10%"` or `"2.5 %"`: extend each end by that
      percentage of the span of the key points.
    - A finite, non-negative real number such as `0.1`: extend each end by that
      fraction of the span.
    - A 2 element tuple, list or 1D ndarray `(lo, hi)`: use this interval as
      given.
"""

import numbers
import re

import numpy as np

from .lib import ValidationError

METHODS = ("linear", "hold")

_PERCENTAGE = re.compile(r"\d+(\.\d+)?\s?%", re.ASCII)


def parse_extrapolate(ex):
    """
    Classify the `extrapolate` option.

    Parameters
    ----------
    ex : None, str, float, or 2 element tuple, list, or 1D ndarray
        See the module docstring.

    Returns
    -------
    kind : str
        One of "none", "fraction", "interval".  Percentages are converted to
        fractions.
    value : None, float, or tuple of float
        The fraction of the span (if `kind == "fraction"`) or the interval
        (if `kind == "interval"`).
    """
    if ex is None:
        return "none", None

    if isinstance(ex, str):
        if _PERCENTAGE.fullmatch(ex) is None:
            raise ValidationError(f"invalid extrapolation parameter {ex!r}")
        return "fraction", float(ex.rstrip("% ")) / 100

    if isinstance(ex, numbers.Real) and not isinstance(ex, (bool, np.bool_)):
        if not (np.isfinite(ex) and ex >= 0):
            raise ValidationError(
                f"invalid extrapolation parameter {ex!r}: expected a finite fraction >= 0"
            )
        return "fraction", float(ex)

    if (isinstance(ex, np.ndarray) and ex.shape == (2,)) or (
        isinstance(ex, (tuple, list)) and len(ex) == 2
    ):
        try:
            lo, hi = (float(e) for e in ex)
        except (TypeError, ValueError):
            raise ValidationError(f"invalid extrapolation parameter {ex!r}")
        if not lo <= hi:
            raise ValidationError(
                f"invalid extrapolation parameter {ex!r}: expected lo <= hi"
            )
        return "interval", (lo, hi)

    raise ValidationError(f"invalid extrapolation parameter {ex!r}")


def extrapolation_range(ex, x_first, x_last):
    """
    The closed interval within which a spline returns values.

    Parameters
    ----------
    ex : None, str, float, or 2 element tuple or list
        The `extrapolate` option. See the module docstring.
    x_first, x_last : float
        The first and last x of all key points.

    Returns
    -------
    lo, hi : float
        Bounds of the extrapolation range.

    Examples
    --------
    >>> extrapolation_range("10%", 0.0, 2.0)
    (-0.2, 2.2)
    >>> extrapolation_range(0.1, 0.0, 2.0)
    (-0.2, 2.2)
    """
    kind, value = parse_extrapolate(ex)
    if kind == "interval":
        return value

    x_first, x_last = float(x_first), float(x_last)
    if kind == "none":
        return x_first, x_last

    extra = (x_last - x_first) * value
    return x_first - extra, x_last + extra


def check_method(method):
    """Raise `ValidationError` unless `method` is a known extrapolation method"""
    if method not in METHODS:
        raise ValidationError(
            f"Expected `extrapolation_method` in {METHODS}; got {method!r}"
        )
    return method


def extrap(v, x, y, k, method, d=0):
    """
    Continue the spline beyond one of its end points.

    Parameters
    ----------
    v : float or ndarray
        Evaluation site(s).
    x, y, k : float
        The end point and the slope of the spline there.
    method : str
        "linear" follows the tangent at the end point; "hold" keeps `y`.
    d : int, Default 0
        If 0, return the value. If 1, return the first derivative.

    Returns
    -------
    y : float or ndarray
        The extrapolated value(s), the same shape as `v`.
    """
    if method == "linear" and d == 0:
        return y + k * (v - x)

    if method == "hold":
        out = y if d == 0 else 0.0
    else:
        out = k
    return out if np.ndim(v) == 0 else np.full(np.shape(v), out)
