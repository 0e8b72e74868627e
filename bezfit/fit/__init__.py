'''
Fit
---
Fit a single Bezier segment to sample points. Every fitter returns a
(curve, report) pair, where report is a common.FitReport.
 - fit.linear: least squares with fixed parameters (using scipy.linalg.cho_solve).
 - fit.alternating: iterated projection and linear least squares.
 - fit.nonlinear: damped Gauss-Newton with backtracking line search.
 - fit.strategies: select a fitter by name.
'''
