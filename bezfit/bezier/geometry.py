import collections

import numpy
from scipy import special

from .. import errors

# absolute per-coordinate tolerance used when deciding whether two points coincide
FLOAT_TOLERANCE = 1e-10
# per-coordinate tolerance when checking that two segments are the halves of one
MERGE_TOLERANCE = 1e-6

Point = collections.namedtuple('Point', ('x', 'y'))
ControlPoint = collections.namedtuple('ControlPoint', ('position', 'on_curve'))
Quadratic = collections.namedtuple('Quadratic', ('p0', 'p1', 'p2'))
Cubic = collections.namedtuple('Cubic', ('p0', 'p1', 'p2', 'p3'))

SEGMENT_TYPES = (Quadratic, Cubic)


class Curve(collections.namedtuple('Curve', ('segments', 'closed'))):
    """An ordered, C0-joined sequence of Quadratic and/or Cubic segments.

    Each segment must start where the previous one ended. If closed is True,
    the end of the last segment must also coincide with the start of the
    first. Violations raise InvalidInputError."""
    __slots__ = ()

    def __new__(cls, segments, closed=False):
        segments = tuple(segments)
        if not segments:
            raise errors.InvalidInputError('A curve must contain at least one segment.')
        for i, segment in enumerate(segments):
            if not isinstance(segment, SEGMENT_TYPES):
                raise errors.InvalidInputError(f'Curve element {i} is not a Quadratic or Cubic segment: {segment!r}')
        for i, (previous, current) in enumerate(zip(segments[:-1], segments[1:])):
            if not points_equal(previous[-1], current[0]):
                raise errors.InvalidInputError(f'Segment {i+1} does not start where segment {i} ends.')
        closed = bool(closed)
        if closed and not points_equal(segments[-1][-1], segments[0][0]):
            raise errors.InvalidInputError('A closed curve must end at its starting point.')
        return super().__new__(cls, segments, closed)

    @property
    def start(self):
        return self.segments[0][0]

    @property
    def end(self):
        return self.segments[-1][-1]


def points_equal(a, b, tolerance=FLOAT_TOLERANCE):
    """Return True if two 2D points agree to within tolerance in each coordinate."""
    return abs(a[0] - b[0]) < tolerance and abs(a[1] - b[1]) < tolerance

def make_segment(control_points):
    """Construct a segment from an array of control points.

    Parameters:
    control_points: array of shape (3, 2) for a quadratic segment or (4, 2)
        for a cubic segment. The first and last rows are the on-curve anchors.

    Returns a Quadratic or Cubic namedtuple of Points."""
    control_points = numpy.asarray(control_points, dtype=float)
    if control_points.ndim != 2 or control_points.shape[1] != 2:
        raise errors.InvalidInputError(f'Control points must have shape (n, 2), not {control_points.shape}.')
    points = [Point(float(x), float(y)) for x, y in control_points]
    if len(points) == 3:
        return Quadratic(*points)
    elif len(points) == 4:
        return Cubic(*points)
    raise errors.InvalidInputError(f'A segment needs 3 (quadratic) or 4 (cubic) control points, not {len(points)}.')

def degree(segment):
    """Return the polynomial degree of a segment: 2 for Quadratic, 3 for Cubic."""
    if isinstance(segment, Cubic):
        return 3
    elif isinstance(segment, Quadratic):
        return 2
    raise TypeError(f'Expected a Quadratic or Cubic segment, got {segment!r}')

def control_points(segment):
    """Return the control points of a segment as an array of shape (degree+1, 2)."""
    degree(segment)
    return numpy.array(segment, dtype=float)

def is_degenerate(segment, tolerance=FLOAT_TOLERANCE):
    """Return True if all control points of the segment coincide."""
    points = control_points(segment)
    return numpy.all(numpy.abs(points - points[0]) < tolerance)

def _de_casteljau(points, t):
    t = numpy.asarray(t, dtype=float)
    scalar = t.ndim == 0
    t = numpy.atleast_1d(t)[:, numpy.newaxis, numpy.newaxis]
    p = numpy.broadcast_to(points, (len(t),) + points.shape)
    while p.shape[1] > 1:
        p = (1 - t) * p[:, :-1] + t * p[:, 1:]
    out = numpy.array(p[:, 0])
    return out[0] if scalar else out

def _hodograph(points):
    return (len(points) - 1) * (points[1:] - points[:-1])

def evaluate(segment, t):
    """Evaluate a segment at parameter value(s) t with De Casteljau's algorithm.

    Parameters:
    segment: Quadratic or Cubic segment.
    t: scalar or array of shape (n,). Values in [0, 1] lie on the segment;
        other values evaluate the underlying polynomial.

    Returns an array of shape (2,) for scalar t, or (n, 2) otherwise."""
    return _de_casteljau(control_points(segment), t)

def derivative(segment, t):
    """Evaluate the first derivative (tangent vector) of a segment at t.
    Output shape follows evaluate()."""
    return _de_casteljau(_hodograph(control_points(segment)), t)

def second_derivative(segment, t):
    """Evaluate the second derivative of a segment at t.
    Output shape follows evaluate()."""
    return _de_casteljau(_hodograph(_hodograph(control_points(segment))), t)

def point_at(segment, t):
    """Return the Point on a segment at scalar parameter t."""
    x, y = evaluate(segment, float(t))
    return Point(float(x), float(y))

def bernstein_basis(degree, t):
    """Return the Bernstein basis polynomials of a given degree evaluated at t.

    Returns an array of shape (len(t), degree+1) whose row i holds the weights
    that evaluate a Bezier segment at t[i] as a combination of its control points."""
    t = numpy.atleast_1d(numpy.asarray(t, dtype=float))[:, numpy.newaxis]
    k = numpy.arange(degree + 1)
    return special.comb(degree, k) * t**k * (1 - t)**(degree - k)

def power_coefficients(segment):
    """Return the monomial coefficients of a segment: an array c of shape
    (degree+1, 2) such that evaluate(segment, t) == sum(c[j] * t**j)."""
    points = control_points(segment)
    d = len(points) - 1
    j = numpy.arange(d + 1)[:, numpy.newaxis]
    k = numpy.arange(d + 1)[numpy.newaxis, :]
    conversion = special.comb(d, j) * special.comb(j, k) * (-1.0)**(j - k)
    conversion[k > j] = 0
    return conversion @ points

def split_segment(segment, t):
    """Split a segment at parameter t into two segments of the same degree.
    The end of the first returned segment is the start of the second."""
    if not 0 <= t <= 1:
        raise errors.InvalidInputError(f'Split parameter must lie in [0, 1], not {t}.')
    left, right = _de_casteljau_split(control_points(segment), t)
    return make_segment(left), make_segment(right)

def _de_casteljau_split(p, t):
    # t outside [0, 1] extrapolates: the left part then extends past the end
    left, right = [], []
    while True:
        left.append(p[0])
        right.append(p[-1])
        if len(p) == 1:
            break
        p = (1 - t) * p[:-1] + t * p[1:]
    return numpy.array(left), numpy.array(right[::-1])

def merge_segments(left, right, tolerance=MERGE_TOLERANCE):
    """Reconstruct the segment that split_segment() divided into left and right.

    The split parameter is recovered from the lengths of the two handles
    that meet at the shared point, the parent is obtained by extending left
    to that parameter, and the result is accepted only if splitting it again
    reproduces both halves to within tolerance in every coordinate.

    Returns the merged segment, or None if left and right are not two parts
    of a single segment."""
    if type(left) is not type(right) or not isinstance(left, SEGMENT_TYPES):
        return None
    if not points_equal(left[-1], right[0], tolerance):
        return None
    a = control_points(left)
    b = control_points(right)
    left_handle = numpy.sqrt(((a[-1] - a[-2])**2).sum())
    right_handle = numpy.sqrt(((b[1] - b[0])**2).sum())
    if left_handle + right_handle == 0:
        return None
    t = left_handle / (left_handle + right_handle)
    if t == 0:
        return None
    parent, _ = _de_casteljau_split(a, 1 / t)
    parent[0], parent[-1] = a[0], b[-1]
    new_left, new_right = _de_casteljau_split(parent, t)
    if numpy.abs(new_left - a).max() > tolerance or numpy.abs(new_right - b).max() > tolerance:
        return None
    return make_segment(parent)

def merge_curve(curve, tolerance=MERGE_TOLERANCE):
    """Return a Curve in which each run of consecutive segments that came from
    splitting a single segment is merged back into that segment."""
    segments = list(curve.segments)
    i = 0
    while i < len(segments) - 1:
        merged = merge_segments(segments[i], segments[i+1], tolerance)
        if merged is None:
            i += 1
        else:
            segments[i:i+2] = [merged]
    return Curve(segments, curve.closed)

def subdivide(curve, t=0.5):
    """Return a new Curve in which every segment is split in two at parameter t."""
    segments = []
    for segment in curve.segments:
        segments.extend(split_segment(segment, t))
    return Curve(segments, curve.closed)

def join(segments, closed=None):
    """Join segments into a Curve.

    If closed is None, the curve is marked closed when the last segment ends
    at the start of the first one."""
    segments = tuple(segments)
    if closed is None:
        closed = bool(segments) and points_equal(segments[-1][-1], segments[0][0])
    return Curve(segments, closed)

def elevate(segment):
    """Return the Cubic that traces exactly the same path as the given segment."""
    if isinstance(segment, Cubic):
        return segment
    p0, p1, p2 = control_points(segment)
    return make_segment([p0, p0 + 2/3 * (p1 - p0), p2 + 2/3 * (p1 - p2), p2])

def perpendiculars(segment, t, unit=True):
    """Return vectors perpendicular to a segment at parameter values t.

    Parameters:
    segment: Quadratic or Cubic segment.
    t: array of parameter values.
    unit: normalize perpendiculars to unit length. Positions with a zero
        tangent produce a zero perpendicular rather than a division error.

    Returns: array of shape (len(t), 2)."""
    tangents = numpy.atleast_2d(derivative(segment, numpy.atleast_1d(t)))
    perps = numpy.empty_like(tangents)
    perps[:,0] = -tangents[:,1]
    perps[:,1] = tangents[:,0]
    if unit:
        lengths = numpy.sqrt((perps**2).sum(axis=1))[:,numpy.newaxis]
        perps = numpy.divide(perps, lengths, out=numpy.zeros_like(perps), where=lengths > 0)
    return perps

def sample_segment(segment, num_points):
    """Return num_points positions on a segment at equally-spaced parameter values."""
    return evaluate(segment, numpy.linspace(0, 1, num_points))

def segment_length(segment):
    """Arc length of a segment, by Gauss-Legendre quadrature of the tangent speed."""
    nodes, weights = numpy.polynomial.legendre.leggauss(16)
    t = 0.5 * (nodes + 1) # map [-1,1] -> [0,1]
    speed = numpy.sqrt((derivative(segment, t)**2).sum(axis=1))
    return 0.5 * (weights * speed).sum()

def cumulative_distances(points, unit=True):
    """Return cumulative distances along a polyline.

    Parameters:
    points: array of shape (n,m) consisting of n points in m dimensions
    unit: if True, return distances divided by total length of the curve,
          if False, return actual arc lengths. A zero-length polyline cannot
          be normalized; its distances are returned as all zeros."""
    points = numpy.asarray(points, dtype=float)
    distances = numpy.concatenate([[0], numpy.add.accumulate(numpy.sqrt(((points[:-1] - points[1:])**2).sum(axis=1)))])
    if unit and distances[-1] > 0:
        distances /= distances[-1]
    return distances
