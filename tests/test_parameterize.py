import numpy
import pytest

from bezfit import errors
from bezfit.bezier import parameterize

POINTS = numpy.array([[0, 0], [3, 4], [3, 8], [3, 8]])

def test_chord_length():
    t = parameterize.chord_length(POINTS)
    numpy.testing.assert_allclose(t, [0, 5/9, 1, 1])

def test_chord_length_is_default():
    numpy.testing.assert_array_equal(parameterize.estimate_parameters(POINTS), parameterize.chord_length(POINTS))

def test_coincident_points_are_spaced_uniformly():
    t = parameterize.chord_length([[1, 1]] * 5)
    numpy.testing.assert_allclose(t, [0, 0.25, 0.5, 0.75, 1])
    numpy.testing.assert_allclose(parameterize.centripetal([[1, 1]] * 3), [0, 0.5, 1])

def test_centripetal():
    t = parameterize.estimate_parameters([[0, 0], [4, 0], [5, 0]], 'centripetal')
    numpy.testing.assert_allclose(t, [0, 2/3, 1])

def test_uniform():
    numpy.testing.assert_allclose(parameterize.estimate_parameters(POINTS, 'uniform'), [0, 1/3, 2/3, 1])

def test_parameters_are_monotonic_and_bounded():
    rng = numpy.random.default_rng(0)
    points = rng.normal(size=(30, 2))
    for method in parameterize.METHODS:
        t = parameterize.estimate_parameters(points, method)
        assert t[0] == 0
        assert t[-1] == pytest.approx(1)
        assert (numpy.diff(t) >= 0).all()

def test_invalid_input():
    with pytest.raises(errors.InvalidInputError):
        parameterize.chord_length([[0, 0]])
    with pytest.raises(errors.InvalidInputError):
        parameterize.chord_length([0, 1, 2])
    with pytest.raises(errors.InvalidInputError):
        parameterize.estimate_parameters(POINTS, 'spline')
