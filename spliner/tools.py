from .spline import Spliner


def interpolate(x, X, Y, **kw):
    """Build a spline through key points and evaluate it, in one call.

    Parameters
    ----------
    x : float, ndarray, or iterable of float
        Evaluation site(s).

    X, Y : array-like
        The x and y values of the key points.

    **kw :
        Options, as for `Spliner`.

    Returns
    -------
    y : float, None, numpy.ma.MaskedArray, or list
        As for `Spliner.get`.

    Examples
    --------
    >>> X, Y = [0.0, 1.0, 2.0], [0.0, 1.0, 0.5]
    >>> interpolate([1.0, 3.0], X, Y, extrapolate="50%", extrapolation_method="hold")
    [1.0, 0.5]
    """
    return Spliner(X, Y, **kw).get(x)


def interpolate_points(x, points, **kw):
    """As `interpolate`, but with key points given as a mapping of x to y."""
    return Spliner.from_points(points, **kw).get(x)
