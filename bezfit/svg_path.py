"""Conversion between Curves and SVG path data, e.g.:

    M 50,200 C 100,50 200,50 250,200 Q 275,275 300,200 Z

Parsing accepts the M, L, H, V, Q, T, C, S, and Z commands in absolute and
relative (lowercase) forms. Straight lines are represented as quadratic
segments with their handle at the midpoint, and are written back out as L
commands. Elliptical arcs are not supported.
"""

import re

from . import errors
from .bezier import geometry

_SEPARATOR = re.compile(r'[\s,]*')
_COMMAND = re.compile(r'[MmLlHhVvQqTtCcSsZz]')
_NUMBER = re.compile(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')

_ARGUMENT_COUNTS = {'M': 2, 'L': 2, 'H': 1, 'V': 1, 'Q': 4, 'T': 2, 'C': 6, 'S': 4, 'Z': 0}

def _tokenize(data):
    tokens = []
    pos = 0
    while True:
        pos = _SEPARATOR.match(data, pos).end()
        if pos == len(data):
            return tokens
        match = _COMMAND.match(data, pos)
        if match:
            tokens.append(match.group())
        else:
            match = _NUMBER.match(data, pos)
            if not match:
                raise errors.ParseError(f'Unexpected character {data[pos]!r} at position {pos} of SVG path data.')
            tokens.append(float(match.group()))
        pos = match.end()

def _line(start, end):
    midpoint = geometry.Point((start.x + end.x) / 2, (start.y + end.y) / 2)
    return geometry.Quadratic(start, midpoint, end)

def _reflect(point, center):
    return geometry.Point(2 * center.x - point.x, 2 * center.y - point.y)


class _PathBuilder:
    """Accumulates segments for the subpaths of one SVG path string."""
    def __init__(self):
        self.curves = []
        self.segments = []
        self.current = geometry.Point(0.0, 0.0)
        self.subpath_start = self.current
        self.previous_handle = None
        self.previous_command = None

    def point(self, x, y, relative):
        if relative:
            return geometry.Point(self.current.x + x, self.current.y + y)
        return geometry.Point(x, y)

    def add(self, segment, command):
        self.segments.append(segment)
        self.current = segment[-1]
        self.previous_handle = segment[-2]
        self.previous_command = command

    def finish_subpath(self, closed):
        if closed and not geometry.points_equal(self.current, self.subpath_start):
            self.add(_line(self.current, self.subpath_start), 'L')
        if self.segments:
            self.curves.append(geometry.Curve(self.segments, closed))
        self.segments = []
        self.current = self.subpath_start
        self.previous_command = None

    def command(self, command, args):
        relative = command.islower()
        command = command.upper()
        if command == 'M':
            self.finish_subpath(closed=False)
            self.current = self.subpath_start = self.point(*args, relative)
            self.previous_command = 'M'
        elif command == 'L':
            self.add(_line(self.current, self.point(*args, relative)), 'L')
        elif command == 'H':
            x = self.current.x + args[0] if relative else args[0]
            self.add(_line(self.current, geometry.Point(x, self.current.y)), 'L')
        elif command == 'V':
            y = self.current.y + args[0] if relative else args[0]
            self.add(_line(self.current, geometry.Point(self.current.x, y)), 'L')
        elif command == 'Q':
            handle = self.point(*args[:2], relative)
            self.add(geometry.Quadratic(self.current, handle, self.point(*args[2:], relative)), 'Q')
        elif command == 'T':
            if self.previous_command in ('Q', 'T'):
                handle = _reflect(self.previous_handle, self.current)
            else:
                handle = self.current
            self.add(geometry.Quadratic(self.current, handle, self.point(*args, relative)), 'T')
        elif command == 'C':
            handle1 = self.point(*args[:2], relative)
            handle2 = self.point(*args[2:4], relative)
            self.add(geometry.Cubic(self.current, handle1, handle2, self.point(*args[4:], relative)), 'C')
        elif command == 'S':
            if self.previous_command in ('C', 'S'):
                handle1 = _reflect(self.previous_handle, self.current)
            else:
                handle1 = self.current
            handle2 = self.point(*args[:2], relative)
            self.add(geometry.Cubic(self.current, handle1, handle2, self.point(*args[2:], relative)), 'S')
        elif command == 'Z':
            self.finish_subpath(closed=True)


def parse_svg_path(data):
    """Parse SVG path data into a list of Curves, one per subpath.

    A subpath ending in Z (or z) is closed; if its current point is not
    already at the subpath start, a straight closing segment is appended.
    Subpaths consisting of a lone moveto produce no Curve.

    Raises ParseError for malformed path data."""
    tokens = _tokenize(data)
    if not tokens:
        return []
    if tokens[0] not in ('M', 'm'):
        raise errors.ParseError('SVG path data must begin with a moveto (M or m) command.')
    builder = _PathBuilder()
    i = 0
    while i < len(tokens):
        command = tokens[i]
        if not isinstance(command, str):
            raise errors.ParseError(f'Unexpected number {command} after a closepath command.')
        i += 1
        count = _ARGUMENT_COUNTS[command.upper()]
        if count == 0:
            builder.command(command, ())
            continue
        repeats = 0
        while i < len(tokens) and not isinstance(tokens[i], str):
            args = tokens[i:i+count]
            if len(args) < count or any(isinstance(arg, str) for arg in args):
                raise errors.ParseError(f'Command {command} requires {count} numeric arguments.')
            builder.command(command, args)
            i += count
            repeats += 1
            if command in ('M', 'm'):
                # additional coordinate pairs after a moveto are implicit linetos
                command = 'L' if command == 'M' else 'l'
        if repeats == 0:
            raise errors.ParseError(f'Command {command} requires {count} numeric arguments.')
    builder.finish_subpath(closed=False)
    return builder.curves

def parse_svg_curve(data):
    """Parse SVG path data that must describe exactly one Curve."""
    curves = parse_svg_path(data)
    if len(curves) != 1:
        raise errors.ParseError(f'Expected SVG path data for exactly one curve, found {len(curves)}.')
    return curves[0]

def _format_number(value, precision):
    value = float(value)
    if precision is not None:
        value = round(value, precision)
    if value == 0:
        return '0'
    text = repr(value)
    if text.endswith('.0'):
        text = text[:-2]
    return text

def _is_line(segment):
    if not isinstance(segment, geometry.Quadratic):
        return False
    start, handle, end = segment
    return handle == ((start.x + end.x) / 2, (start.y + end.y) / 2)

def format_svg_path(curve, precision=None):
    """Format a Curve as SVG path data.

    Cubic segments become C commands, quadratic segments Q commands, and
    quadratics whose handle lies exactly at the midpoint of their endpoints
    (straight lines) L commands. A closed curve ends with Z.

    Parameters:
    curve: Curve to format.
    precision: if not None, round coordinates to this many decimal places."""
    def fmt(point):
        return _format_number(point[0], precision) + ',' + _format_number(point[1], precision)
    parts = ['M ' + fmt(curve.start)]
    for segment in curve.segments:
        if _is_line(segment):
            parts.append('L ' + fmt(segment[-1]))
        elif isinstance(segment, geometry.Quadratic):
            parts.append('Q ' + ' '.join(fmt(p) for p in segment[1:]))
        elif isinstance(segment, geometry.Cubic):
            parts.append('C ' + ' '.join(fmt(p) for p in segment[1:]))
        else:
            raise TypeError(f'Expected a Quadratic or Cubic segment, got {segment!r}')
    if curve.closed:
        parts.append('Z')
    return ' '.join(parts)
