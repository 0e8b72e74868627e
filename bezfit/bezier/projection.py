import numpy
from numpy.polynomial import polynomial

from . import geometry

# candidates within this relative margin of the minimum count as ties
_TIE_TOLERANCE = 1e-9

def closest_point(segment, point):
    """Find the position on a segment closest to a query point.

    The squared distance from the query point to the segment is a polynomial
    in t (degree 6 for a cubic, 4 for a quadratic). Its derivative is solved
    for all roots; every root (clamped to [0, 1]) plus both endpoints is
    evaluated as a candidate, so boundary minima are never missed. Ties
    resolve to the smallest t.

    Parameters:
    segment: Quadratic or Cubic segment.
    point: query point of shape (2,).

    Returns: (t, distance). For a degenerate segment whose control points
    all coincide, t is 0 and distance is measured to the first control point."""
    point = numpy.asarray(point, dtype=float)
    if geometry.is_degenerate(segment):
        start = geometry.control_points(segment)[0]
        return 0.0, float(numpy.sqrt(((point - start)**2).sum()))
    offset = geometry.power_coefficients(segment)
    offset[0] -= point
    squared_distance = polynomial.polyadd(polynomial.polymul(offset[:,0], offset[:,0]),
        polynomial.polymul(offset[:,1], offset[:,1]))
    roots = polynomial.polyroots(polynomial.polyder(squared_distance))
    candidates = numpy.concatenate([[0, 1], roots.real.clip(0, 1)])
    candidates = numpy.unique(candidates) # sorted ascending
    distances = ((geometry.evaluate(segment, candidates) - point)**2).sum(axis=1)
    best = distances.min()
    i = numpy.flatnonzero(distances <= best * (1 + _TIE_TOLERANCE) + numpy.finfo(float).tiny)[0]
    return float(candidates[i]), float(numpy.sqrt(distances[i]))

def project_points(segment, points):
    """Project each of a set of points onto a segment.

    Parameters:
    segment: Quadratic or Cubic segment.
    points: array of shape (n, 2).

    Returns: (t, distances), each an array of shape (n,)."""
    points = numpy.asarray(points, dtype=float)
    t = numpy.empty(len(points))
    distances = numpy.empty(len(points))
    for i, point in enumerate(points):
        t[i], distances[i] = closest_point(segment, point)
    return t, distances

def closest_point_on_curve(curve, point):
    """Find the position on a multi-segment Curve closest to a query point.

    Returns: (segment_index, t, distance). Ties resolve to the earliest segment."""
    best = None
    for i, segment in enumerate(curve.segments):
        t, distance = closest_point(segment, point)
        if best is None or distance < best[2]:
            best = i, t, distance
    return best

def perpendicular_line(segment, point, length):
    """Return the endpoints (start, end) of a line of the given length,
    perpendicular to the segment and centered on the position of the segment
    closest to the query point."""
    t, distance = closest_point(segment, point)
    center = geometry.evaluate(segment, t)
    perp = geometry.perpendiculars(segment, [t])[0]
    half = perp * (length / 2)
    return center - half, center + half

def max_deviation(segment, points):
    """Return the largest distance from any of the given points to the segment."""
    _, distances = project_points(segment, points)
    return float(distances.max())

def within_tolerance(segment, points, tolerance):
    """Return True if every point lies within tolerance of the segment."""
    return max_deviation(segment, points) <= tolerance
