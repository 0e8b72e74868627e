"""Conversion between Curves and flat lists of on/off-curve control points,
and the JSON encoding of such lists:

    [{"x": 0.0, "y": 0.0, "on": true}, {"x": 1.0, "y": 1.0, "on": false}, ...]

Point sequences are interpreted as follows:
    on, off, on: quadratic segment
    on, off, off, on: cubic segment
    on, on: straight line, stored as a quadratic with its handle at the midpoint
Consecutive segments share their joining on-curve point.
"""

import json
import numbers
import os
import pathlib
import tempfile

import numpy

from . import errors
from .bezier import geometry

def curve_to_control_points(curve):
    """Flatten a Curve into a list of ControlPoints.

    Shared endpoints between consecutive segments appear once. For a closed
    curve the final point repeats the first, which is how closure is
    recognized again by control_points_to_curve()."""
    control_points = [geometry.ControlPoint(curve.start, True)]
    for segment in curve.segments:
        for handle in segment[1:-1]:
            control_points.append(geometry.ControlPoint(handle, False))
        control_points.append(geometry.ControlPoint(segment[-1], True))
    return control_points

def control_points_to_curve(control_points, closed=None):
    """Build a Curve from a sequence of ControlPoints.

    Parameters:
    control_points: sequence of ControlPoint (or (position, on_curve) pairs).
    closed: if None, the curve is closed when the last point coincides with
        the first; otherwise the given value is used.

    Raises ParseError if the on/off-curve pattern does not describe a
    sequence of quadratic and cubic segments."""
    control_points = [geometry.ControlPoint(geometry.Point(*map(float, position)), bool(on_curve))
        for position, on_curve in control_points]
    if not control_points:
        raise errors.ParseError('No control points given.')
    segments = []
    i = 0
    while i < len(control_points) - 1:
        start, on_curve = control_points[i]
        if not on_curve:
            raise errors.ParseError(f'Expected an on-curve point at index {i}.')
        # gather the off-curve handles up to the next on-curve point
        j = i + 1
        while j < len(control_points) and not control_points[j].on_curve:
            j += 1
        if j == len(control_points):
            raise errors.ParseError('A curve cannot end with an off-curve point.')
        handles = [position for position, on_curve in control_points[i+1:j]]
        end = control_points[j].position
        if len(handles) == 0:
            midpoint = geometry.Point((start.x + end.x) / 2, (start.y + end.y) / 2)
            segments.append(geometry.Quadratic(start, midpoint, end))
        elif len(handles) == 1:
            segments.append(geometry.Quadratic(start, handles[0], end))
        elif len(handles) == 2:
            segments.append(geometry.Cubic(start, handles[0], handles[1], end))
        else:
            raise errors.ParseError(f'Found {len(handles)} consecutive off-curve points at index {i+1}; at most 2 are allowed.')
        i = j
    if not segments:
        raise errors.ParseError('At least two on-curve points are required to form a curve.')
    try:
        return geometry.join(segments, closed)
    except errors.InvalidInputError as e:
        raise errors.ParseError(str(e)) from e


class _NumpyEncoder(json.JSONEncoder):
    """JSON encoder that is smart about converting iterators and numpy arrays to
    lists, and converting numpy scalars to python scalars.
    """
    def default(self, o):
        if isinstance(o, numpy.generic):
            return o.item()
        try:
            return list(o)
        except TypeError:
            return super().default(o)


_COMPACT_ENCODER = _NumpyEncoder(separators=(',', ':'))
_READABLE_ENCODER = _NumpyEncoder(indent=4)

def _point_records(control_points):
    return [{'x': position[0], 'y': position[1], 'on': bool(on_curve)} for position, on_curve in control_points]

def dumps_points(control_points, legible=False):
    """Encode a sequence of ControlPoints as a JSON string of {"x", "y", "on"} records."""
    encoder = _READABLE_ENCODER if legible else _COMPACT_ENCODER
    return encoder.encode(_point_records(control_points))

def loads_points(text):
    """Decode a JSON string of {"x", "y", "on"} records into a list of ControlPoints.
    The "on" field is optional and defaults to true."""
    try:
        records = json.loads(text)
    except json.JSONDecodeError as e:
        raise errors.ParseError(f'Invalid JSON: {e}') from e
    if not isinstance(records, list):
        raise errors.ParseError('Expected a JSON array of point records.')
    control_points = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            raise errors.ParseError(f'Point record {i} is not a JSON object.')
        try:
            x, y = record['x'], record['y']
        except KeyError as e:
            raise errors.ParseError(f'Point record {i} is missing the {e} coordinate.') from e
        on_curve = record.get('on', True)
        for value in (x, y):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise errors.ParseError(f'Point record {i} has a non-numeric coordinate: {value!r}.')
        if not isinstance(on_curve, bool):
            raise errors.ParseError(f'Point record {i} has a non-boolean "on" value: {on_curve!r}.')
        control_points.append(geometry.ControlPoint(geometry.Point(float(x), float(y)), on_curve))
    return control_points

def dumps_curve(curve, legible=False):
    """Encode a Curve as a JSON string of control-point records."""
    return dumps_points(curve_to_control_points(curve), legible)

def loads_curve(text, closed=None):
    """Decode a JSON string of control-point records into a Curve."""
    return control_points_to_curve(loads_points(text), closed)

def dump_curve(curve, filename):
    """Encode a Curve as nicely-formatted JSON and, if there was no error,
    atomically write it to a file.

    Care is taken to never overwrite an existing file except in an atomic manner
    after all other steps have occured: the result of this function is all or
    none.

    Parameters:
        curve: Curve to encode.
        filename: string or pathlib.Path object for destination file.
    """
    s = dumps_curve(curve, legible=True)
    filename = pathlib.Path(filename)
    prefix = filename.name + '-temp.'
    fd, tmp_path = tempfile.mkstemp(prefix=prefix, dir=str(filename.parent))
    try:
        with os.fdopen(fd, 'w') as f:
            f.write(s)
        os.replace(tmp_path, str(filename))
    except Exception:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

def load_curve(filename, closed=None):
    """Read a Curve from a JSON file written by dump_curve()."""
    return loads_curve(pathlib.Path(filename).read_text(), closed)
