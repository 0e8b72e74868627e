import collections
import logging
import numbers

import numpy

from .. import errors
from ..bezier import geometry
from ..bezier import parameterize

logger = logging.getLogger(__name__)

Sample = collections.namedtuple('Sample', ('point', 'parameter'), defaults=(None,))

FitReport = collections.namedtuple('FitReport',
    ('residual_sum_of_squares', 'iterations', 'converged', 'reason', 'residual_history'))
FitReport.__doc__ = """Quality report returned by every fitter alongside the fitted Curve.

residual_sum_of_squares: sum over samples of the squared distance between
    each sample point and the curve evaluated at that sample's parameter.
iterations: number of refinement iterations performed (0 for the closed-form
    linear fit).
converged: False if the fit fell back to a heuristic, ran out of iterations,
    or could not find an improving step.
reason: short string describing why the fit stopped: 'solved', 'tolerance',
    'residual_floor', 'max_distance', 'step_size', 'max_iterations', 'degenerate',
    'line_search', or 'singular'.
residual_history: residual sums of squares observed, starting with the
    initial fit.
"""

SUPPORTED_DEGREES = (2, 3)

_OPTION_FIELDS = ('tolerance', 'max_iterations', 'degree', 'fit_parameters',
    'residual_floor', 'min_step_scale', 'backtrack_factor', 'damping', 'max_distance')

class FitOptions(collections.namedtuple('FitOptions', _OPTION_FIELDS,
        defaults=(1e-6, 50, 3, True, 1e-12, 1e-10, 0.5, 1e-9, None))):
    """Options recognized by the fitters.

    tolerance: iterative fitters stop when the relative improvement in the
        residual (or, for the nonlinear fitter, the relative step size) drops
        below this value.
    max_iterations: iteration budget for the iterative fitters.
    degree: 3 for cubic segments, 2 for quadratic segments.
    fit_parameters: if True, the nonlinear fitter also optimizes the
        per-sample parameters; otherwise they stay fixed.
    residual_floor: a residual sum of squares at or below this value counts
        as an exact fit.
    min_step_scale: the backtracking line search gives up once the step
        scale falls below this value.
    backtrack_factor: multiplier in (0, 1) applied to the step scale on each
        backtracking trial.
    damping: relative size of the diagonal term added to ill-conditioned
        Gauss-Newton normal equations.
    max_distance: if not None, the alternating fitter also stops once every
        sample lies within this distance of the fitted segment.
    """
    __slots__ = ()

    def validate(self):
        """Return self if all option values are usable, else raise InvalidInputError."""
        if self.degree not in SUPPORTED_DEGREES:
            raise errors.InvalidInputError(f'degree must be 2 (quadratic) or 3 (cubic), not {self.degree!r}.')
        if not _is_integer(self.max_iterations) or self.max_iterations < 0:
            raise errors.InvalidInputError(f'max_iterations must be a non-negative integer, not {self.max_iterations!r}.')
        if not _is_real(self.tolerance) or not self.tolerance > 0:
            raise errors.InvalidInputError('tolerance must be positive.')
        if not _is_real(self.residual_floor) or not self.residual_floor >= 0:
            raise errors.InvalidInputError('residual_floor must be non-negative.')
        if not _is_real(self.min_step_scale) or not 0 < self.min_step_scale < 1:
            raise errors.InvalidInputError('min_step_scale must lie in (0, 1).')
        if not _is_real(self.backtrack_factor) or not 0 < self.backtrack_factor < 1:
            raise errors.InvalidInputError('backtrack_factor must lie in (0, 1).')
        if not _is_real(self.damping) or not self.damping > 0:
            raise errors.InvalidInputError('damping must be positive.')
        if self.max_distance is not None and (not _is_real(self.max_distance) or not self.max_distance > 0):
            raise errors.InvalidInputError('max_distance must be None or positive.')
        return self


def _is_integer(value):
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)

def _is_real(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and numpy.isfinite(value)

def get_options(options=None, **overrides):
    """Return a validated FitOptions from an optional FitOptions instance and
    keyword overrides of individual fields."""
    if options is None:
        options = FitOptions()
    if overrides:
        try:
            options = options._replace(**overrides)
        except ValueError as e:
            raise errors.InvalidInputError(str(e)) from e
    return options.validate()

def split_samples(samples):
    """Convert a sequence of Sample values into (points, parameters).

    Parameters are either given for every sample or for none, in which case
    None is returned in their place so that they will be estimated."""
    samples = list(samples)
    points = numpy.array([sample.point for sample in samples], dtype=float)
    given = [sample.parameter is not None for sample in samples]
    if not any(given):
        return points, None
    if not all(given):
        raise errors.InvalidInputError('Sample parameters must be supplied for every sample or for none.')
    return points, numpy.array([sample.parameter for sample in samples], dtype=float)

def prepare_samples(points, parameters=None):
    """Validate sample points and parameters, estimating the parameters by
    chord length if none are given.

    The fitters pin the segment endpoints to the first and last samples, so
    explicit parameters are rescaled to run from exactly 0 to 1.

    Returns: (points, parameters) as float arrays of shape (n, 2) and (n,)."""
    points = numpy.array(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 2:
        raise errors.InvalidInputError(f'Sample points must have shape (n, 2), not {points.shape}.')
    if len(points) < 2:
        raise errors.InvalidInputError(f'At least 2 samples are required, got {len(points)}.')
    if not numpy.isfinite(points).all():
        raise errors.InvalidInputError('Sample points must be finite.')
    if parameters is None:
        parameters = parameterize.chord_length(points)
    else:
        parameters = normalize_parameters(check_parameters(parameters, len(points)))
    return points, parameters

def check_parameters(parameters, count):
    """Ensure that explicitly supplied parameters are finite, lie in [0, 1],
    are non-decreasing, and match the number of samples."""
    parameters = numpy.array(parameters, dtype=float)
    if parameters.shape != (count,):
        raise errors.InvalidInputError(f'Expected {count} parameter values, got shape {parameters.shape}.')
    if not numpy.isfinite(parameters).all():
        raise errors.InvalidInputError('Parameter values must be finite.')
    if parameters.min() < 0 or parameters.max() > 1:
        raise errors.InvalidInputError('Parameter values must lie in [0, 1].')
    if (numpy.diff(parameters) < 0).any():
        raise errors.InvalidInputError('Parameter values must be non-decreasing.')
    return parameters

def residuals(segment, points, parameters):
    """Return the array (n, 2) of offsets from each sample to the segment at its parameter."""
    return geometry.evaluate(segment, parameters) - points

def residual_sum_of_squares(segment, points, parameters):
    return float((residuals(segment, points, parameters)**2).sum())

def normalize_parameters(parameters):
    """Map non-decreasing parameters affinely so that the first is 0 and the
    last is 1. Parameters that are all equal cannot be rescaled and are
    returned unchanged; the fitters treat them as degenerate."""
    first, last = parameters[0], parameters[-1]
    if (first == 0 and last == 1) or last == first:
        return parameters
    logger.debug('Rescaling parameters from [%g, %g] to [0, 1].', first, last)
    normalized = (parameters - first) / (last - first)
    normalized[-1] = 1
    return normalized
