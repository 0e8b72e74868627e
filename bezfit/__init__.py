'''
# bezfit

Fitting of quadratic and cubic Bezier segments to sampled plane curves.

Bezier
------
Geometry of piecewise Bezier curves, represented as namedtuples of control points.
 - bezier.geometry: evaluation, derivatives, splitting and merging, degree elevation, and arc length of segments and curves.
 - bezier.projection: closest points on segments and curves, found as roots of the distance derivative, and maximum deviation of samples from a segment.
 - bezier.parameterize: chord-length, centripetal, and uniform parameter estimates for sample polylines.

Fit
---
Fitting of a single Bezier segment to a sequence of samples.
 - fit.linear: closed-form least-squares fit with fixed sample parameters.
 - fit.alternating: alternate projection-based reparameterization with linear re-fits.
 - fit.nonlinear: Gauss-Newton minimization over control points and sample parameters, with a backtracking line search.
 - fit.strategies: run any of the above on a sequence of Sample values.

Input/output
------------
 - datafile: on/off-curve control point lists and their JSON encoding.
 - svg_path: read and write curves as SVG path data.

'''
