import numpy

from . import geometry
from .. import errors

def chord_length(points):
    """Assign each point a parameter in [0, 1] proportional to the cumulative
    distance along the polyline through the points.

    If the polyline has zero length (all points coincide), the parameters are
    spaced uniformly instead.

    Parameters:
    points: array of shape (n, 2)

    Returns: array of shape (n,), starting at 0 and ending at 1."""
    points = _as_polyline(points)
    distances = geometry.cumulative_distances(points, unit=False)
    if distances[-1] == 0:
        return uniform(points)
    return distances / distances[-1]

def centripetal(points):
    """Like chord_length(), but accumulate the square roots of the distances
    between consecutive points, which tempers overshoot at sharp turns."""
    points = _as_polyline(points)
    steps = numpy.sqrt(numpy.sqrt(((points[1:] - points[:-1])**2).sum(axis=1)))
    distances = numpy.concatenate([[0], numpy.add.accumulate(steps)])
    if distances[-1] == 0:
        return uniform(points)
    return distances / distances[-1]

def uniform(points):
    """Assign evenly-spaced parameters i / (n-1) to n points."""
    points = _as_polyline(points)
    return numpy.linspace(0, 1, len(points))

METHODS = {
    'chord_length': chord_length,
    'centripetal': centripetal,
    'uniform': uniform
}

def estimate_parameters(points, method='chord_length'):
    """Estimate initial parameter values for a sequence of sample points.

    Parameters:
    points: array of shape (n, 2), n >= 2
    method: one of 'chord_length' (default), 'centripetal', or 'uniform'.

    Returns: non-decreasing array of shape (n,) running from 0 to 1."""
    try:
        estimator = METHODS[method]
    except KeyError:
        raise errors.InvalidInputError(f'Unknown parameterization method "{method}"; expected one of {sorted(METHODS)}.')
    return estimator(points)

def _as_polyline(points):
    points = numpy.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 2:
        raise errors.InvalidInputError(f'Points must have shape (n, 2), not {points.shape}.')
    if len(points) < 2:
        raise errors.InvalidInputError('At least two points are required to assign parameters.')
    return points
