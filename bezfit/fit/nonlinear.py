import logging

import numpy
from scipy import linalg

from . import common
from . import linear
from ..bezier import geometry

logger = logging.getLogger(__name__)

# JtJ with a smaller ratio of smallest to largest eigenvalue gets diagonal damping
_MIN_RECIPROCAL_CONDITION = 1e-12
_MAX_DAMPING_INCREASES = 8

def fit_nonlinear(points, parameters=None, options=None, **option_overrides):
    """Fit a single Bezier segment by Gauss-Newton minimization of the sum of
    squared distances between samples and the segment.

    The unknowns are the coordinates of the interior control points and, if
    options.fit_parameters is True, the parameters of the interior samples
    (the first and last samples stay pinned to the segment endpoints). The
    initial guess is the linear least-squares fit for the given (or
    chord-length) parameters.

    Each iteration solves the normal equations (JtJ) d = -Jt r, adding a small
    diagonal damping term when JtJ is ill-conditioned, then backtracks from
    the full step until the residual strictly decreases. Parameters are
    clamped back into [0, 1] after every trial step. If no step scale above
    options.min_step_scale improves the residual, the fit stops and reports
    non-convergence, keeping the pre-step state. The residual therefore never
    increases from one iteration to the next.

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

    start, end = points[0], points[-1]
    n_handle_coords = 2 * (options.degree - 1)
    if options.fit_parameters:
        free = numpy.arange(1, len(points) - 1)
    else:
        free = numpy.arange(0)

    def unpack(state):
        handles = state[:n_handle_coords].reshape(-1, 2)
        t = parameters.copy()
        t[free] = state[n_handle_coords:]
        return geometry.make_segment(numpy.concatenate([[start], handles, [end]])), t

    state = numpy.concatenate([geometry.control_points(segment)[1:-1].ravel(), parameters[free]])
    iterations = 0
    converged, reason = False, 'max_iterations'
    if rss <= options.residual_floor:
        converged, reason = True, 'residual_floor'

    while not converged and iterations < options.max_iterations:
        iterations += 1
        segment, t = unpack(state)
        residual, jacobian = residual_and_jacobian(segment, points, t, free)
        step = gauss_newton_step(jacobian, residual, options.damping)
        if step is None:
            reason = 'singular'
            break
        if numpy.linalg.norm(step) <= options.tolerance * (numpy.linalg.norm(state) + options.tolerance):
            converged, reason = True, 'step_size'
            break

        scale = 1.0
        while scale >= options.min_step_scale:
            trial = state + scale * step
            trial[n_handle_coords:] = trial[n_handle_coords:].clip(0, 1)
            trial_segment, trial_t = unpack(trial)
            trial_rss = common.residual_sum_of_squares(trial_segment, points, trial_t)
            if trial_rss < rss:
                break
            scale *= options.backtrack_factor
        else:
            logger.debug('Line search found no improving step at iteration %d (residual %g).', iterations, rss)
            reason = 'line_search'
            break

        logger.debug('Gauss-Newton iteration %d: residual %g -> %g (step scale %g)', iterations, rss, trial_rss, scale)
        improvement = (rss - trial_rss) / rss
        state, rss = trial, trial_rss
        history.append(rss)
        if rss <= options.residual_floor:
            converged, reason = True, 'residual_floor'
        elif improvement < options.tolerance:
            converged, reason = True, 'tolerance'

    segment, _ = unpack(state)
    return geometry.Curve([segment]), common.FitReport(rss, iterations, converged, reason, tuple(history))

def residual_and_jacobian(segment, points, parameters, free):
    """Return the flattened residual vector r (length 2n, ordered x0, y0, x1, ...)
    and its Jacobian with respect to the interior control-point coordinates
    followed by the parameters of the samples indexed by free.

    Each parameter affects only its own sample's residual, so the parameter
    columns are zero except for that sample's two rows, which hold the
    segment tangent at the parameter."""
    residual = common.residuals(segment, points, parameters).ravel()
    basis = geometry.bernstein_basis(geometry.degree(segment), parameters)
    control_jacobian = numpy.kron(basis[:,1:-1], numpy.eye(2))
    parameter_jacobian = numpy.zeros((len(residual), len(free)))
    tangents = geometry.derivative(segment, parameters[free])
    columns = numpy.arange(len(free))
    parameter_jacobian[2*free, columns] = tangents[:,0]
    parameter_jacobian[2*free + 1, columns] = tangents[:,1]
    return residual, numpy.hstack([control_jacobian, parameter_jacobian])

def gauss_newton_step(jacobian, residual, damping):
    """Solve the Gauss-Newton normal equations (JtJ) d = -Jt r.

    If JtJ is ill-conditioned, damping times its largest eigenvalue is added
    to the diagonal; the damping grows tenfold each time the solve still
    fails. Returns None if no solution could be found."""
    jtj = jacobian.T @ jacobian
    jtr = jacobian.T @ residual
    eigenvalues = numpy.linalg.eigvalsh(jtj)
    scale = max(eigenvalues.max(), numpy.finfo(float).tiny)
    damping_term = 0
    if eigenvalues.min() <= scale * _MIN_RECIPROCAL_CONDITION:
        damping_term = damping * scale
    identity = numpy.eye(len(jtj))
    for _ in range(_MAX_DAMPING_INCREASES):
        try:
            return linalg.solve(jtj + damping_term * identity, -jtr, assume_a='pos')
        except linalg.LinAlgError:
            damping_term = max(10 * damping_term, damping * scale)
            logger.debug('Normal equations not positive definite; damping increased to %g.', damping_term)
    return None
