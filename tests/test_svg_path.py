import pytest

from bezfit import errors
from bezfit import svg_path
from bezfit.bezier import geometry

P = geometry.Point

def test_format_cubic(arch):
    assert svg_path.format_svg_path(geometry.Curve([arch])) == 'M 0,0 C 1,2 3,2 4,0'

def test_format_mixed_closed_curve(arch):
    back = geometry.Quadratic(arch.p3, P(2.0, -2.5), P(0.0, 0.0))
    curve = geometry.Curve([arch, back], closed=True)
    assert svg_path.format_svg_path(curve) == 'M 0,0 C 1,2 3,2 4,0 Q 2,-2.5 0,0 Z'

def test_format_lines_and_precision():
    line = geometry.Quadratic(P(0.0, -0.0), P(0.5, 1 / 3), P(1.0, 2 / 3))
    assert svg_path.format_svg_path(geometry.Curve([line])) == 'M 0,0 L 1,' + repr(2 / 3)
    assert svg_path.format_svg_path(geometry.Curve([line]), precision=3) == 'M 0,0 L 1,0.667'

def test_parse_cubic(arch):
    curve = svg_path.parse_svg_curve('M 0,0 C 1,2 3,2 4,0')
    assert curve == geometry.Curve([arch])

def test_parse_relative_and_smooth_commands():
    curve = svg_path.parse_svg_curve('m 1 1 c 1 1 2 1 3 0 s 2 -1 3 0')
    first, second = curve.segments
    assert first == geometry.Cubic(P(1, 1), P(2, 2), P(3, 2), P(4, 1))
    assert second == geometry.Cubic(P(4, 1), P(5, 0), P(6, 0), P(7, 1))

def test_parse_smooth_quadratic():
    curve = svg_path.parse_svg_curve('M0 0Q1 1 2 0T4 0t2 0')
    assert [segment.p1 for segment in curve.segments] == [P(1, 1), P(3, -1), P(5, 1)]
    # T without a preceding quadratic uses the current point as its handle
    curve = svg_path.parse_svg_curve('M0 0 T2 2')
    assert curve.segments[0] == geometry.Quadratic(P(0, 0), P(0, 0), P(2, 2))

def test_parse_lines():
    curve = svg_path.parse_svg_curve('M 0 0 H 4 v 2 L 0,2')
    assert [segment.p2 for segment in curve.segments] == [P(4, 0), P(4, 2), P(0, 2)]
    assert curve.segments[0].p1 == P(2, 0)
    assert all(isinstance(segment, geometry.Quadratic) for segment in curve.segments)

def test_implicit_lineto_after_moveto():
    curve = svg_path.parse_svg_curve('m 1,1 2,0 0,2')
    assert [segment.p2 for segment in curve.segments] == [P(3, 1), P(3, 3)]

def test_close_inserts_closing_segment():
    curve = svg_path.parse_svg_curve('M 0,0 L 3,0 L 3,4 Z')
    assert curve.closed
    assert len(curve.segments) == 3
    assert curve.segments[-1] == geometry.Quadratic(P(3, 4), P(1.5, 2), P(0, 0))

def test_close_at_start_adds_nothing(arch):
    back = geometry.Quadratic(arch.p3, P(2.0, -2.0), arch.p0)
    curve = svg_path.parse_svg_curve('M 0,0 C 1,2 3,2 4,0 Q 2,-2 0,0 z')
    assert curve == geometry.Curve([arch, back], closed=True)

def test_multiple_subpaths():
    curves = svg_path.parse_svg_path('M 0 0 L 1 1 Z M 5 5 Q 6 6 7 5 M 9 9')
    assert len(curves) == 2
    assert curves[0].closed and not curves[1].closed
    assert curves[1].start == P(5, 5)
    with pytest.raises(errors.ParseError):
        svg_path.parse_svg_curve('M 0 0 L 1 1 M 5 5 L 6 6')

def test_number_syntax():
    curve = svg_path.parse_svg_curve('M.5-.5L1e1,-2.5e-1')
    assert curve.start == P(0.5, -0.5)
    assert curve.end == P(10, -0.25)

def test_round_trip(arch):
    back = geometry.Quadratic(arch.p3, P(2.0, -2.5), P(0.0, 0.0))
    line = geometry.Quadratic(P(0.0, 0.0), P(-1.0, 0.5), P(-2.0, 1.0))
    curve = geometry.Curve([arch, back, line])
    assert svg_path.parse_svg_curve(svg_path.format_svg_path(curve)) == curve

@pytest.mark.parametrize('text', [
    'L 1 1',
    'M 0 0 L 1',
    'M 0 0 C 1 1 2 2',
    'M 0 0 L 1 1 Z 4 4',
    'M 0 0 A 1 1 0 0 1 2 2',
    'M 0 0 L',
])
def test_malformed_paths(text):
    with pytest.raises(errors.ParseError):
        svg_path.parse_svg_path(text)
