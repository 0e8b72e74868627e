from . import alternating
from . import common
from . import linear
from . import nonlinear
from .. import errors

FITTERS = {
    'linear': linear.fit_linear,
    'alternating': alternating.fit_alternating,
    'nonlinear': nonlinear.fit_nonlinear
}

def fit_samples(samples, method='linear', options=None, **option_overrides):
    """Fit a single Bezier segment to a sequence of Sample values.

    Parameters:
    samples: sequence of Sample(point, parameter). Parameters must be given
        for all samples or for none; in the latter case they are estimated
        by chord length.
    method: 'linear', 'alternating', or 'nonlinear'.
    options: FitOptions instance or None for defaults.
    option_overrides: individual FitOptions fields.

    Returns: (curve, report) from the selected fitter.
    """
    try:
        fitter = FITTERS[method]
    except KeyError:
        raise errors.InvalidInputError(f'Unknown fitting method "{method}"; expected one of {sorted(FITTERS)}.')
    points, parameters = common.split_samples(samples)
    return fitter(points, parameters, options, **option_overrides)
