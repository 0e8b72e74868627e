'''
Bezier
------
Geometry of piecewise quadratic and cubic Bezier curves.
 - bezier.geometry: points, segments, and curves, and the basic algorithms over them, including splitting and merging.
 - bezier.projection: closest point on a segment or curve to a query point.
 - bezier.parameterize: estimate curve parameters for an ordered set of sample points.
'''
