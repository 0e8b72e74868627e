import logging

from . import common
from . import linear
from ..bezier import geometry
from ..bezier import projection

logger = logging.getLogger(__name__)

def fit_alternating(points, parameters=None, options=None, **option_overrides):
    """Fit a single Bezier segment by alternating reparameterization and
    linear least squares.

    Starting from the given (or chord-length) parameters and one linear fit,
    each iteration projects every sample onto the current segment to obtain
    a refined parameter, then re-solves the linear least-squares problem with
    those parameters. Iteration stops when the relative improvement in the
    residual falls below options.tolerance, the residual reaches
    options.residual_floor, every sample lies within options.max_distance of
    the best segment so far (if that option is set), or
    options.max_iterations is exhausted.

    The returned curve is the best one observed over all iterations, which is
    not necessarily the last.

    Parameters:
    points: array of shape (n, 2), n >= 2
    parameters: initial parameters of shape (n,), or None for chord length.
    options: FitOptions instance or None for defaults.
    option_overrides: individual FitOptions fields.

    Returns: (curve, report)
    """
    options = common.get_options(options, **option_overrides)
    points, parameters = common.prepare_samples(points, parameters)
    segment, solved = linear.solve_control_points(points, parameters, options.degree)
    rss = common.residual_sum_of_squares(segment, points, parameters)
    history = [rss]
    if not solved:
        return geometry.Curve([segment]), common.FitReport(rss, 0, False, 'degenerate', tuple(history))

    best_segment, best_rss = segment, rss
    iterations = 0
    converged, reason = False, 'max_iterations'
    if rss <= options.residual_floor:
        converged, reason = True, 'residual_floor'
    elif _close_enough(segment, points, options):
        converged, reason = True, 'max_distance'

    while not converged and iterations < options.max_iterations:
        iterations += 1
        parameters, _ = projection.project_points(segment, points)
        segment, solved = linear.solve_control_points(points, parameters, options.degree)
        if not solved:
            reason = 'singular'
            break
        new_rss = common.residual_sum_of_squares(segment, points, parameters)
        history.append(new_rss)
        logger.debug('Alternating fit iteration %d: residual %g -> %g', iterations, rss, new_rss)
        if new_rss < best_rss:
            best_segment, best_rss = segment, new_rss
        improvement = (rss - new_rss) / rss
        rss = new_rss
        if rss <= options.residual_floor:
            converged, reason = True, 'residual_floor'
        elif _close_enough(best_segment, points, options):
            converged, reason = True, 'max_distance'
        elif abs(improvement) < options.tolerance:
            converged, reason = True, 'tolerance'

    return geometry.Curve([best_segment]), common.FitReport(best_rss, iterations, converged, reason, tuple(history))

def _close_enough(segment, points, options):
    return options.max_distance is not None and projection.within_tolerance(segment, points, options.max_distance)
