"""Library of simple functions for preparing key points for `spliner`"""

import numpy as np
import numba as nb


class ValidationError(ValueError):
    """Raised when key points or options cannot be used to build a spline."""


def as_key_points(X, Y):
    """Convert independent and dependent data into 1D float arrays

    Parameters
    ----------
    X, Y : array-like
        The x and y values of the key points, in increasing x order.

    Returns
    -------
    X, Y : ndarray(float, 1d)
        Copies of the inputs, as contiguous `float64` arrays.
    """
    X = np.array(X, dtype=np.float64)
    Y = np.array(Y, dtype=np.float64)
    if X.ndim != 1 or Y.ndim != 1:
        raise ValidationError(
            f"Expected X and Y to be 1 dimensional; got {X.ndim}d and {Y.ndim}d"
        )
    if X.size == 0:
        raise ValidationError("At least one key point is required")
    if X.size != Y.size:
        raise ValidationError(
            f"Expected X and Y of the same length; got {X.size} and {Y.size}"
        )
    return X, Y


def points_to_xy(points):
    """Split a mapping of x -> y key points into its x and y values

    The iteration order of `points` is taken to be the x order.
    """
    if not hasattr(points, "keys"):
        raise TypeError(
            f"Expected `points` to be a mapping of x to y; got {type(points).__name__}"
        )
    return list(points.keys()), list(points.values())


@nb.njit
def first_non_increasing(X):
    """The index `i` of the first pair with `X[i+1] <= X[i]`, or -1 if none.

    NaN's compare as non-increasing.
    """
    for i in range(X.size - 1):
        if not X[i + 1] > X[i]:
            return i
    return -1


def check_increasing(X):
    """Raise `ValidationError` unless `X` is strictly increasing"""
    i = first_non_increasing(X)
    if i >= 0:
        raise ValidationError(
            f"non-increasing x: X[{i + 1}] = {X[i + 1]} follows X[{i}] = {X[i]}"
        )


def split_at_duplicates(X):
    """Slices of `X` between repeated x values

    Parameters
    ----------
    X : ndarray(float, 1d)
        The independent data.

    Returns
    -------
    slices : list of slice
        One slice per maximal run of `X` that has no exact duplicate between
        consecutive elements.  Where `X[i+1] == X[i]`, one run ends at `i` and
        the next starts at `i + 1`.

    Examples
    --------
    >>> split_at_duplicates(np.array([0.0, 1.0, 1.0, 2.0, 2.0, 3.0]))
    [slice(0, 2, None), slice(2, 4, None), slice(4, 6, None)]
    """
    starts = np.flatnonzero(X[1:] == X[:-1]) + 1
    bounds = [0, *starts.tolist(), X.size]
    return [slice(a, b) for a, b in zip(bounds[:-1], bounds[1:])]


def fix_invalid_x(X, Y):
    """Delete key points whose x does not exceed that of their predecessor

    Each pass examines every consecutive pair `(X[i], X[i+1])` and deletes the
    later point wherever `X[i+1] <= X[i]`.  Passes repeat until one deletes
    nothing.  The first point is never deleted, so the result is never empty.

    Parameters
    ----------
    X, Y : ndarray(float, 1d)
        The key points.

    Returns
    -------
    X, Y : ndarray(float, 1d)
        The remaining key points.

    n_removed : int
        The number of key points deleted.

    Notes
    -----
    This is a best-effort cleanup.  After it, no consecutive pair decreases
    or repeats, but which points survive an oscillating input depends on the
    order of deletions, not on any notion of the "right" curve.
    """
    n = X.size
    while True:
        bad = np.flatnonzero(~(X[1:] > X[:-1])) + 1
        if bad.size == 0:
            break
        X = np.delete(X, bad)
        Y = np.delete(Y, bad)
    return X, Y, n - X.size
