import numpy
import pytest

from bezfit.bezier import geometry

@pytest.fixture
def arch():
    """A symmetric cubic arch from (0, 0) to (4, 0)."""
    return geometry.Cubic(geometry.Point(0.0, 0.0), geometry.Point(1.0, 2.0),
        geometry.Point(3.0, 2.0), geometry.Point(4.0, 0.0))

@pytest.fixture
def hump():
    return geometry.Quadratic(geometry.Point(0.0, 0.0), geometry.Point(1.0, 1.0), geometry.Point(2.0, 0.0))

@pytest.fixture
def skewed_samples(arch):
    """Samples of the arch at unevenly spaced parameters, so that chord length
    is only an approximation of the true parameterization."""
    t = numpy.linspace(0, 1, 20)**1.4
    return geometry.evaluate(arch, t), t
