"""A single continuous section of a cubic spline.

A `Section` holds a strictly increasing run of key points and the slope of the
interpolant at each of them.  The slopes come from the tridiagonal system that
makes the first and second derivatives of the piecewise cubic continuous at
interior knots, with zero second derivative at both ends (a "natural" spline).
The system is solved once, when the `Section` is built; afterwards, evaluation
only needs the key points and their slopes.

The evaluation kernels are `numba.njit`ed, and follow the same conventions for
locating the evaluation site within the knots as `spliner.lib`.
"""

import numpy as np
import numba as nb
from scipy.sparse import csc_matrix
from scipy.sparse.linalg import spsolve

from .lib import ValidationError, as_key_points, check_increasing


@nb.njit
def _segment(x, X):
    """
    Index of the segment of `X` containing `x`.

    Parameters
    ----------
    x : float
        Evaluation site. Must satisfy `X[0] <= x <= X[-1]`; this is not checked.
    X : ndarray(float, 1d)
        Independent data, strictly increasing, with at least two elements.

    Returns
    -------
    i : int
        Such that `0 <= i <= len(X) - 2` and
            `X[0] <= x <= X[1]`  when  `i == 0`,
            `X[i] <  x <= X[i+1]`  when  `i >= 1`.
        That is, a knot shared by two segments belongs to the left segment.
    """
    # searchsorted gives j with X[j-1] < x <= X[j], or j == 0 if x == X[0].
    return max(0, np.searchsorted(X, x) - 1)


@nb.njit
def _hermite(x, X, Y, K, i):
    """
    The "kernel" of cubic Hermite interpolation on segment `i`.

    Parameters
    ----------
    x : float
        Evaluation site, with `X[i] <= x <= X[i+1]`.
    X, Y : ndarray(float, 1d)
        Independent and dependent data.
    K : ndarray(float, 1d)
        Slope of the interpolant at each knot.
    i : int
        Segment index, as from `_segment`.

    Returns
    -------
    y : float
        The interpolant evaluated at `x`.
    """
    dx = X[i + 1] - X[i]
    dy = Y[i + 1] - Y[i]
    t = (x - X[i]) / dx
    a = K[i] * dx - dy
    b = -(K[i + 1] * dx - dy)
    u = 1.0 - t
    return t * Y[i + 1] + u * (Y[i] + t * (a * u + b * t))


@nb.njit
def _hermite1(x, X, Y, K, i):
    """
    The "kernel" of the 1st derivative of cubic Hermite interpolation.

    Inputs and outputs analogous to `_hermite`.
    """
    dx = X[i + 1] - X[i]
    dy = Y[i + 1] - Y[i]
    t = (x - X[i]) / dx
    a = K[i] * dx - dy
    b = -(K[i + 1] * dx - dy)
    u = 1.0 - t
    return (dy + (u - t) * (a * u + b * t) + t * u * (b - a)) / dx


@nb.njit
def _hermite_1(x, X, Y, K, d):
    """Evaluate the `d`'th derivative (0 or 1) of the interpolant at `x`."""
    i = _segment(x, X)
    if d == 0:
        return _hermite(x, X, Y, K, i)
    else:
        return _hermite1(x, X, Y, K, i)


@nb.njit
def _hermite_n(x, X, Y, K, d):
    """As `_hermite_1` but for a 1D array of evaluation sites."""
    y = np.empty(x.size, dtype=np.float64)
    for j in range(x.size):
        y[j] = _hermite_1(x[j], X, Y, K, d)
    return y


def slopes(X, Y):
    """Solve for the slope of the natural cubic spline at each knot

    Parameters
    ----------
    X : ndarray(float, 1d)
        Independent data. Strictly increasing, with at least two elements.
    Y : ndarray(float, 1d)
        Dependent data, the same length as `X`.

    Returns
    -------
    K : ndarray(float, 1d)
        The derivative of the interpolant at each element of `X`.

    Notes
    -----
    With `h = 1 / diff(X)` and `t = 3 * diff(Y) * h**2`, the system is

        h[0] (2 K[0] + K[1]) = t[0]
        h[i-1] (K[i-1] + 2 K[i]) + h[i] (2 K[i] + K[i+1]) = t[i-1] + t[i]
        h[n-2] (K[n-2] + 2 K[n-1]) = t[n-2]

    for interior `i`.  The matrix is symmetric and strictly diagonally
    dominant, so it is nonsingular whenever `X` is strictly increasing.
    """
    N = X.size
    h = 1.0 / np.diff(X)
    t = 3.0 * np.diff(Y) * h**2

    # Each segment adds to two diagonal entries and one symmetric pair of
    # off-diagonal entries; duplicate (r, c) entries are summed by csc_matrix.
    seg = np.arange(N - 1)
    r = np.concatenate((seg, seg + 1, seg, seg + 1))
    c = np.concatenate((seg, seg + 1, seg + 1, seg))
    v = np.concatenate((2.0 * h, 2.0 * h, h, h))
    A = csc_matrix((v, (r, c)), shape=(N, N))

    b = np.zeros(N)
    b[:-1] += t
    b[1:] += t

    K = np.atleast_1d(spsolve(A, b))
    if not np.all(np.isfinite(K)):
        raise RuntimeError("Slope system for the spline section is singular.")
    return K


class Section:
    """
    A strictly increasing run of key points, interpolated by a cubic spline.

    Parameters
    ----------
    x, y : array-like
        The key points. `x` must be strictly increasing. A single key point is
        allowed; it is matched only by an evaluation site exactly equal to it.

    Attributes
    ----------
    x, y : ndarray(float, 1d)
        The key points (read-only).
    k : ndarray(float, 1d)
        Slope of the interpolant at each key point (read-only). A single key
        point has slope 0.

    Raises
    ------
    ValidationError
        If `x` and `y` are empty or have different lengths, or if `x` is not
        strictly increasing.
    """

    def __init__(self, x, y):
        x, y = as_key_points(x, y)
        check_increasing(x)

        if x.size == 1:
            k = np.zeros(1)
        else:
            k = slopes(x, y)

        for a in (x, y, k):
            a.flags.writeable = False
        self.x, self.y, self.k = x, y, k

    def __len__(self):
        return self.x.size

    def __repr__(self):
        return f"Section({self.x.size} points, range={self.range})"

    @property
    def range(self):
        """The closed interval `(x[0], x[-1])` covered by this section."""
        return float(self.x[0]), float(self.x[-1])

    def covers(self, v):
        """Whether `v` (scalar or ndarray) lies within `range`."""
        return (self.x[0] <= v) & (v <= self.x[-1])

    def evaluate(self, v, d=0):
        """
        Evaluate the interpolant, or its first derivative, at `v`.

        Parameters
        ----------
        v : float
            Evaluation site.
        d : int, Default 0
            If 0, evaluate the interpolant. If 1, its first derivative.

        Returns
        -------
        y : float or None
            The interpolant at `v`, or None if `v` is outside this section.
        """
        _check_deriv(d)
        if not self.covers(v):
            return None
        if self.x.size == 1:
            return float(self.y[0]) if d == 0 else 0.0
        return float(_hermite_1(float(v), self.x, self.y, self.k, d))

    def evaluate_n(self, v, d=0):
        """
        As `evaluate` for a 1D array `v`, all of whose elements are covered.

        Returns an ndarray of the same size as `v`.
        """
        _check_deriv(d)
        v = np.asarray(v, dtype=np.float64)
        if self.x.size == 1:
            return np.full(v.size, self.y[0] if d == 0 else 0.0)
        return _hermite_n(v, self.x, self.y, self.k, d)


def _check_deriv(d):
    if d not in (0, 1):
        raise ValueError(f"Expected derivative order `d` in (0, 1); got {d}")
