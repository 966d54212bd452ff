import numpy as np
import pytest

from scipy.interpolate import CubicSpline

from spliner import Spliner, ValidationError, interpolate, interpolate_points

tol = 1e-4

# Three sections: [0, 1], [1, 2], [2, 3]
X_dup = [0.0, 1.0, 1.0, 2.0, 2.0, 3.0]
Y_dup = [0.0, 0.0, 1.0, 1.0, 2.0, 2.0]


def test_example_from_points():
    s = Spliner.from_points({0.0: 0.0, 1.0: 1.0, 2.0: 0.5})
    expected = {0.4: 0.5260, 0.8: 0.9080, 1.2: 1.0080, 1.6: 0.8260}
    for x, y in expected.items():
        assert abs(s.get(x) - y) < tol
    assert s.n_sections == 1
    assert s.range == (0.0, 2.0)


def test_key_points_reproduced():
    X = np.cumsum(np.random.default_rng(0).uniform(0.1, 2.0, 20))
    Y = np.random.default_rng(1).normal(size=20)
    s = Spliner(X, Y)
    for x, y in zip(X, Y):
        assert abs(s(x) - y) < 1e-12


def test_matches_natural_cubic_spline():
    X = np.linspace(0, 10, 12) ** 1.2
    Y = np.sin(X / X[-1] * 2 * np.pi)
    x = np.linspace(X[0], X[-1], 101)
    y = Spliner(X, Y).get(x)
    assert not np.any(np.ma.getmaskarray(y))
    assert np.allclose(y.filled(np.nan), CubicSpline(X, Y, bc_type="natural")(x))


def test_outside_without_extrapolation_is_none():
    s = Spliner([0.0, 1.0, 2.0], [0.0, 1.0, 0.5])
    assert s(-1e-9) is None
    assert s(2.0 + 1e-9) is None
    assert s(np.nan) is None
    assert s(0.0) == 0.0
    assert s(2.0) == 0.5


def test_sections_from_duplicates():
    s = Spliner(X_dup, Y_dup, extrapolate=[3.0, 4.0])
    assert s.n_sections == 3
    assert s.range == (3.0, 4.0)
    assert s(-1.0) is None
    assert abs(s(0.5) - 0.0) < tol
    assert abs(s(1.5) - 1.0) < tol
    assert abs(s(2.5) - 2.0) < tol
    assert abs(s(3.5) - 2.0) < tol
    assert s(5.0) is None


def test_sections_do_not_leak():
    X = [0.0, 1.0, 2.0, 2.0, 3.0, 4.0]
    Y = [0.0, 1.0, 0.0, 10.0, 12.0, 10.0]
    s = Spliner(X, Y)
    left = Spliner(X[:3], Y[:3])
    right = Spliner(X[3:], Y[3:])
    assert s.n_sections == 2
    for x in np.linspace(0.0, 2.0, 11):
        assert s(x) == left(x)
    # The shared x belongs to the first section
    assert s(2.0) == 0.0
    for x in np.linspace(2.001, 4.0, 11):
        assert s(x) == right(x)


def test_single_point_sections():
    s = Spliner([0.0, 1.0, 1.0], [0.0, 1.0, 5.0])
    assert s.n_sections == 2
    assert [len(sec) for sec in s.sections] == [2, 1]
    assert s(1.0) == 1.0  # first section wins
    assert abs(s(0.5) - 0.5) < 1e-12

    s = Spliner([2.0], [3.0])
    assert s.n_sections == 1
    assert s(2.0) == 3.0
    assert s(2.5) is None


def test_hold():
    X, Y = [0.0, 1.0, 2.0], [0.0, 1.0, 0.5]
    s = Spliner(X, Y, extrapolate="50%", extrapolation_method="hold")
    assert s(-0.5) == 0.0
    assert s(-1e-3) == 0.0
    assert s(2.5) == 0.5
    assert s(2.5, d=1) == 0.0
    assert s(3.5) is None


def test_linear():
    X, Y = [0.0, 1.0, 2.0], [0.0, 1.0, 0.5]
    s = Spliner(X, Y, extrapolate=1.0)
    k0, k2 = s.sections[0].k[0], s.sections[-1].k[-1]
    eps = 1e-3
    assert abs(s(-eps) - (Y[0] - k0 * eps)) < 1e-12
    assert abs(s(-eps) - s(eps)) < 2.1 * abs(k0) * eps
    assert abs(s(2.0 + eps) - (Y[-1] + k2 * eps)) < 1e-12
    assert abs(s(-1.5) - (Y[0] - 1.5 * k0)) < 1e-12
    assert s(-1.5, d=1) == k0
    assert s(3.5, d=1) == k2


def test_linear_is_default():
    s = Spliner([0.0, 1.0], [0.0, 2.0], extrapolate=(-1.0, 2.0))
    assert s.extrapolation_method == "linear"
    assert abs(s(-1.0) + 2.0) < 1e-12
    assert abs(s(2.0) - 4.0) < 1e-12


@pytest.mark.parametrize(
    "ex",
    [
        "10%",
        "10 %",
        "10.0%",
        0.1,
        (-0.5, 5.5),
        [-0.5, 5.5],
        np.array([-0.5, 5.5]),
    ],
)
def test_range_forms_agree(ex):
    s = Spliner([0.0, 1.0, 5.0], [0.0, 1.0, 2.0], extrapolate=ex)
    assert s.range == (-0.5, 5.5)


def test_narrow_interval_keeps_sections():
    s = Spliner([0.0, 1.0, 2.0], [0.0, 1.0, 0.5], extrapolate=(0.5, 1.0))
    assert s(0.25) is not None
    assert s(1.5) is not None


def test_batch_shapes():
    s = Spliner([0.0, 1.0, 2.0], [0.0, 1.0, 0.5])
    x = [0.4, 3.0, 1.6]

    y = s(x)
    assert isinstance(y, list)
    assert y[1] is None
    assert [round(v, 4) for v in (y[0], y[2])] == [0.526, 0.826]

    assert s(tuple(x)) == y
    assert s(v for v in x) == y
    assert s(range(4)) == [0.0, 1.0, 0.5, None]

    xa = np.array([[0.4, 3.0], [1.6, -1.0]])
    ya = s(xa)
    assert isinstance(ya, np.ma.MaskedArray)
    assert ya.shape == (2, 2)
    assert ya.mask.tolist() == [[False, True], [False, True]]
    assert ya[0, 0] == y[0] and ya[1, 0] == y[2]

    assert s(np.float64(0.4)) == y[0]
    assert s(np.array(0.4)) == y[0]


def test_batch_matches_scalar():
    s = Spliner(X_dup, Y_dup, extrapolate="25%")
    x = np.linspace(-2.0, 5.0, 57)
    ya = s(x)
    for xi, yi, mi in zip(x, ya.data, np.ma.getmaskarray(ya)):
        y1 = s(xi)
        if mi:
            assert y1 is None
        else:
            assert y1 == yi


def test_fix_invalid_x():
    X = [0.0, 1.0, 0.5, 2.0, 2.0, 3.0]
    Y = [0.0, 1.0, 9.0, 2.0, 9.0, 3.0]
    with pytest.raises(ValidationError):
        Spliner(X, Y)
    s = Spliner(X, Y, fix_invalid_x=True)
    assert s.n_removed == 2
    assert s.n_sections == 1
    assert s.sections[0].x.tolist() == [0.0, 1.0, 2.0, 3.0]


def test_output(capsys):
    Spliner(X_dup, Y_dup, output=True)
    out = capsys.readouterr().out
    assert "spliner done" in out
    assert "3 sections" in out


@pytest.mark.parametrize(
    "kw",
    [
        dict(extrapolate="10"),
        dict(extrapolate="-10%"),
        dict(extrapolate="ten%"),
        dict(extrapolate=(1.0,)),
        dict(extrapolate=(2.0, 1.0)),
        dict(extrapolate=np.array([2.0, 1.0])),
        dict(extrapolate=np.array([[0.0, 1.0]])),
        dict(extrapolate=-0.6),
        dict(extrapolate=float("nan")),
        dict(extrapolate=float("inf")),
        dict(extrapolate="\u0661\u0660%"),
        dict(extrapolate=True),
        dict(extrapolate={}),
        dict(extrapolation_method="cubic"),
    ],
)
def test_invalid_options(kw):
    with pytest.raises(ValidationError):
        Spliner([0.0, 1.0], [0.0, 1.0], **kw)


def test_unknown_option():
    with pytest.raises(TypeError):
        Spliner([0.0, 1.0], [0.0, 1.0], emethod="hold")


def test_invalid_points():
    with pytest.raises(ValidationError):
        Spliner([], [])
    with pytest.raises(ValidationError):
        Spliner.from_points({})
    with pytest.raises(ValidationError, match="non-increasing"):
        Spliner([0.0, 2.0, 1.0], [0.0, 1.0, 2.0])
    with pytest.raises(TypeError):
        Spliner.from_points([(0.0, 1.0), (1.0, 2.0)])
    with pytest.raises(ValidationError, match="1 dimensional"):
        Spliner([[0.0, 1.0], [2.0, 3.0]], [0.0, 1.0, 2.0, 3.0])


def test_bad_query():
    s = Spliner([0.0, 1.0], [0.0, 1.0])
    with pytest.raises(TypeError):
        s.get(object())
    with pytest.raises(ValueError):
        s.get(0.5, d=2)


def test_interpolate():
    X, Y = [0.0, 1.0, 2.0], [0.0, 1.0, 0.5]
    y = interpolate([0.4, 1.2], X, Y)
    assert abs(y[0] - 0.5260) < tol
    assert abs(y[1] - 1.0080) < tol
    assert interpolate(3.0, X, Y) is None
    assert interpolate(3.0, X, Y, extrapolate="50%", extrapolation_method="hold") == 0.5
    assert interpolate_points(1.6, dict(zip(X, Y))) == interpolate(1.6, X, Y)
