"""Cubic spline interpolation through key points, in one or more sections.

Example
-------
>>> from spliner import Spliner
>>> s = Spliner([0.0, 1.0, 2.0], [0.0, 1.0, 0.5])
>>> round(s(0.4), 4)
0.526
>>> [None if y is None else round(y, 6) for y in s([0.5, 1.5, 2.5])]
[0.640625, 0.890625, None]
>>> s = Spliner([0.0, 1.0, 2.0], [0.0, 1.0, 0.5], extrapolate="10%")
>>> s.range
(-0.2, 2.2)
"""

import numbers
from time import time

import numpy as np

from .extrapolate import check_method, extrap, extrapolation_range
from .lib import as_key_points, fix_invalid_x, points_to_xy, split_at_duplicates
from .section import Section, _check_deriv

OPTIONS = ("extrapolate", "extrapolation_method", "fix_invalid_x", "output")


class Spliner:
    """
    Cubic spline interpolation of y as a function of x.

    The key points should be in increasing x order.  Where an x value is
    repeated, the spline is split into separate, independently interpolated
    sections: one ending at the first of the repeated points, the next starting
    at the second.

    Parameters
    ----------
    X : array-like
        The x values of the key points.

    Y : array-like
        The y values of the key points, the same length as `X`.

    extrapolate : None, str, float, or 2 element tuple or list, Default None
        Range over which the spline may be evaluated beyond its key points.

        - If None, the spline is only evaluated between its first and last
          key points.
        - If a string such as "10%", extend the range at both ends by this
          percentage of the span of `X`.
        - If a float such as 0.1, extend the range at both ends by this
          fraction of the span of `X`.
        - If `(lo, hi)`, use this range.

    extrapolation_method : str, Default "linear"

        - If "linear", beyond the first or last key point the spline continues
          along its tangent at that key point.
        - If "hold", the spline holds the y value of that key point.

    fix_invalid_x : bool, Default False
        If True, delete key points whose x does not exceed that of the
        preceding key point, repeating until none remain.
        See `spliner.lib.fix_invalid_x`.

    output : bool, Default False
        If True, print a summary of the spline once it is built.

    Attributes
    ----------
    sections : tuple of Section
        The independently interpolated sections, in x order.

    range : tuple of float
        The closed interval `(lo, hi)` outside which the spline gives None.

    extrapolation_method : str
        As in the parameters.

    n_removed : int
        Number of key points deleted by `fix_invalid_x`.

    Raises
    ------
    ValidationError
        If there are no key points, `X` and `Y` differ in length, `X` decreases
        anywhere (unless `fix_invalid_x`), or an option has an invalid value.

    TypeError
        If an unknown option is given.
    """

    def __init__(self, X, Y, **kw):
        unknown = set(kw) - set(OPTIONS)
        if unknown:
            raise TypeError(f"Unknown options {sorted(unknown)}; expected {OPTIONS}")

        extrapolate = kw.get("extrapolate")
        method = kw.get("extrapolation_method", "linear")
        fix = kw.get("fix_invalid_x", False)
        output = kw.get("output", False)

        timer = time()
        X, Y = as_key_points(X, Y)
        self.extrapolation_method = check_method(method)

        self.n_removed = 0
        if fix:
            X, Y, self.n_removed = fix_invalid_x(X, Y)

        self.range = extrapolation_range(extrapolate, X[0], X[-1])
        self.sections = tuple(Section(X[s], Y[s]) for s in split_at_duplicates(X))

        if output:
            lo, hi = self.range
            print(
                f"spliner done | {self.n_sections:4d} sections"
                f" | range [{lo:.6g}, {hi:.6g}]"
                f" | removed {self.n_removed} points"
                f" | {time() - timer:.3f} sec"
            )

    @classmethod
    def from_points(cls, points, **kw):
        """
        Build a spline from a mapping of key points.

        Parameters
        ----------
        points : dict
            Keys are the x values, in increasing order; values are the y values.

        **kw :
            Options, as for `Spliner`.
        """
        X, Y = points_to_xy(points)
        return cls(X, Y, **kw)

    def __repr__(self):
        return (
            f"Spliner({self.n_sections} sections, range={self.range}, "
            f"extrapolation_method={self.extrapolation_method!r})"
        )

    @property
    def n_sections(self):
        """The number of independently interpolated sections"""
        return len(self.sections)

    def get(self, x, d=0):
        """
        Evaluate the spline (or its first derivative) at `x`.

        Parameters
        ----------
        x : float, ndarray, or iterable of float
            Evaluation site(s).

        d : int, Default 0
            If 0, evaluate the spline. If 1, evaluate its first derivative.

        Returns
        -------
        y : float, None, numpy.ma.MaskedArray, or list
            If `x` is a scalar, the value of the spline at `x` as a float, or
            None if `x` is outside `range`.

            If `x` is an ndarray, a masked array of the same shape whose
            masked elements are outside `range`.

            If `x` is any other iterable, a list with one element per element
            of `x`, each a float or None as in the scalar case.
        """
        _check_deriv(d)
        if isinstance(x, np.ndarray):
            if x.ndim == 0:
                return self._get_1(x.item(), d)
            return self._get_n(x, d)
        if isinstance(x, numbers.Real):
            return self._get_1(x, d)
        try:
            it = iter(x)
        except TypeError:
            raise TypeError(
                f"Expected `x` to be a number or an iterable of numbers; got {type(x).__name__}"
            )
        return [self._get_1(v, d) for v in it]

    __call__ = get

    def extrapolate(self, v, d=0):
        """
        Extrapolate the spline from its nearest end point to `v`.

        The first key point is used if `v` is below it; otherwise the last key
        point is used.  This does not check whether `v` is within `range`.

        Parameters
        ----------
        v : float or ndarray
            Evaluation site(s).

        d : int, Default 0
            If 0, return the value. If 1, return the first derivative.

        Returns
        -------
        y : float or ndarray
            The extrapolated value(s), the same shape as `v`.
        """
        _check_deriv(d)
        first, last = self.sections[0], self.sections[-1]
        below = v < first.x[0]
        lower = extrap(
            v, first.x[0], first.y[0], first.k[0], self.extrapolation_method, d
        )
        upper = extrap(
            v, last.x[-1], last.y[-1], last.k[-1], self.extrapolation_method, d
        )
        if np.ndim(v) == 0:
            return float(lower if below else upper)
        return np.where(below, lower, upper)

    def _get_1(self, v, d):
        """Evaluate at a single site `v`, giving None outside `range`"""
        for section in self.sections:
            y = section.evaluate(v, d)
            if y is not None:
                return y
        lo, hi = self.range
        if lo <= v <= hi:
            return self.extrapolate(v, d)
        return None

    def _get_n(self, x, d):
        """Evaluate at every site in the ndarray `x`; see `get`"""
        v = np.asarray(x, dtype=np.float64).ravel()
        y = np.full(v.shape, np.nan)
        found = np.zeros(v.shape, dtype=bool)

        # The first section covering a site evaluates it
        for section in self.sections:
            m = ~found & section.covers(v)
            if np.any(m):
                y[m] = section.evaluate_n(v[m], d)
                found |= m

        lo, hi = self.range
        m = ~found & (lo <= v) & (v <= hi)
        if np.any(m):
            y[m] = self.extrapolate(v[m], d)
            found |= m

        return np.ma.MaskedArray(y, mask=~found).reshape(np.shape(x))
