import logging

import numpy
from scipy import linalg

from . import common
from ..bezier import geometry

logger = logging.getLogger(__name__)

# normal equations whose smallest/largest eigenvalue ratio falls below this are treated as singular
_MIN_RECIPROCAL_CONDITION = 1e-12

def fit_linear(points, parameters=None, options=None, **option_overrides):
    """Fit a single Bezier segment to sample points with fixed parameter values.

    The first and last samples become the on-curve endpoints of the segment;
    the interior control points are the linear least-squares solution for
    the given parameterization. If the normal equations are singular (e.g.
    too few distinct parameter values), the interior control points are
    placed evenly along the chord between the endpoints instead and the fit
    is reported as not converged.

    Parameters:
    points: array of shape (n, 2), n >= 2
    parameters: array of shape (n,) with non-decreasing values in [0, 1], or
        None to use chord-length parameterization.
    options: FitOptions instance or None for defaults; only the degree is
        used by this fitter.
    option_overrides: individual FitOptions fields, e.g. degree=2.

    Returns: (curve, report), where curve is a single-segment Curve and report
        is a FitReport with iterations = 0.
    """
    options = common.get_options(options, **option_overrides)
    points, parameters = common.prepare_samples(points, parameters)
    segment, solved = solve_control_points(points, parameters, options.degree)
    rss = common.residual_sum_of_squares(segment, points, parameters)
    reason = 'solved' if solved else 'degenerate'
    return geometry.Curve([segment]), common.FitReport(rss, 0, solved, reason, (rss,))

def solve_control_points(points, parameters, degree):
    """Solve for the interior control points of a segment of the given degree
    whose endpoints are pinned to the first and last points.

    Parameters are not validated here: the alternating and nonlinear fitters
    call this with parameters that may no longer be monotonic.

    Returns: (segment, solved), where solved is False if the chord fallback
        was used."""
    basis = geometry.bernstein_basis(degree, parameters)
    start, end = points[0], points[-1]
    # move the known endpoint contributions to the right-hand side
    target = points - numpy.outer(basis[:,0], start) - numpy.outer(basis[:,-1], end)
    interior = basis[:,1:-1]
    normal = interior.T @ interior
    eigenvalues = numpy.linalg.eigvalsh(normal)
    if eigenvalues.max() <= 0 or eigenvalues.min() <= eigenvalues.max() * _MIN_RECIPROCAL_CONDITION:
        logger.debug('Singular normal equations for %d samples; placing handles along the chord.', len(points))
        return chord_segment(start, end, degree), False
    try:
        factor = linalg.cho_factor(normal)
    except linalg.LinAlgError:
        logger.debug('Cholesky factorization failed; placing handles along the chord.')
        return chord_segment(start, end, degree), False
    handles = linalg.cho_solve(factor, interior.T @ target)
    return geometry.make_segment(numpy.concatenate([[start], handles, [end]])), True

def chord_segment(start, end, degree):
    """Return a segment of the given degree whose control points are evenly
    spaced along the straight line from start to end."""
    fractions = numpy.linspace(0, 1, degree + 1)[:, numpy.newaxis]
    return geometry.make_segment((1 - fractions) * start + fractions * end)
