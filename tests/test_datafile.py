import json

import numpy
import pytest

from bezfit import datafile
from bezfit import errors
from bezfit.bezier import geometry

P = geometry.Point

@pytest.fixture
def mixed_curve(arch):
    back = geometry.Quadratic(arch.p3, P(2.0, -2.0), arch.p0)
    return geometry.Curve([arch, back], closed=True)

def test_curve_to_control_points(mixed_curve):
    control_points = datafile.curve_to_control_points(mixed_curve)
    assert [on for position, on in control_points] == [True, False, False, True, False, True]
    assert control_points[0].position == control_points[-1].position

def test_control_points_round_trip(mixed_curve):
    control_points = datafile.curve_to_control_points(mixed_curve)
    assert datafile.control_points_to_curve(control_points) == mixed_curve

def test_straight_line_becomes_quadratic():
    curve = datafile.control_points_to_curve([((0, 0), True), ((2, 4), True), ((4, 4), False), ((6, 0), True)])
    line, quadratic = curve.segments
    assert line == geometry.Quadratic(P(0, 0), P(1, 2), P(2, 4))
    assert quadratic == geometry.Quadratic(P(2, 4), P(4, 4), P(6, 0))
    assert not curve.closed

def test_closure(mixed_curve):
    control_points = datafile.curve_to_control_points(mixed_curve)
    assert not datafile.control_points_to_curve(control_points, closed=False).closed
    open_points = [((0, 0), True), ((1, 1), False), ((2, 0), True)]
    with pytest.raises(errors.ParseError):
        datafile.control_points_to_curve(open_points, closed=True)

@pytest.mark.parametrize('flags', [
    [False, True, True],
    [True, False, True, False],
    [True, False, False, False, True],
    [True],
    [],
])
def test_invalid_point_sequences(flags):
    control_points = [((float(i), 0.0), on) for i, on in enumerate(flags)]
    with pytest.raises(errors.ParseError):
        datafile.control_points_to_curve(control_points)

def test_dumps_points(arch):
    text = datafile.dumps_curve(geometry.Curve([arch]))
    assert json.loads(text) == [
        {'x': 0, 'y': 0, 'on': True},
        {'x': 1, 'y': 2, 'on': False},
        {'x': 3, 'y': 2, 'on': False},
        {'x': 4, 'y': 0, 'on': True}
    ]
    assert ' ' not in text
    assert '\n' in datafile.dumps_curve(geometry.Curve([arch]), legible=True)

def test_dumps_numpy_values():
    control_points = [(numpy.array([1.5, 2]), numpy.bool_(True)), ((numpy.float32(3), 4), True)]
    assert json.loads(datafile.dumps_points(control_points)) == [
        {'x': 1.5, 'y': 2, 'on': True},
        {'x': 3, 'y': 4, 'on': True}
    ]

def test_loads_points_defaults_on_curve():
    control_points = datafile.loads_points('[{"x": 1, "y": 2}, {"x": 3, "y": 4, "on": false}]')
    assert control_points == [geometry.ControlPoint(P(1, 2), True), geometry.ControlPoint(P(3, 4), False)]

@pytest.mark.parametrize('text', [
    'not json',
    '{"x": 1, "y": 2}',
    '[1, 2]',
    '[{"x": 1}]',
    '[{"x": "1", "y": 2}]',
    '[{"x": 1, "y": 2, "on": "yes"}]',
    '[{"x": true, "y": 2}]',
])
def test_loads_points_rejects_malformed_records(text):
    with pytest.raises(errors.ParseError):
        datafile.loads_points(text)

def test_json_round_trip(mixed_curve):
    assert datafile.loads_curve(datafile.dumps_curve(mixed_curve)) == mixed_curve

def test_dump_and_load_curve(tmp_path, mixed_curve):
    path = tmp_path / 'curve.json'
    datafile.dump_curve(mixed_curve, path)
    assert datafile.load_curve(path) == mixed_curve
    # overwriting leaves no temporary files behind
    datafile.dump_curve(mixed_curve, str(path))
    assert [p.name for p in tmp_path.iterdir()] == ['curve.json']

def test_failed_write_keeps_existing_file(tmp_path, mixed_curve, arch, monkeypatch):
    path = tmp_path / 'curve.json'
    datafile.dump_curve(mixed_curve, path)

    def fail_replace(src, dst):
        raise OSError('disk full')
    monkeypatch.setattr(datafile.os, 'replace', fail_replace)
    with pytest.raises(OSError):
        datafile.dump_curve(geometry.Curve([arch]), path)
    assert datafile.load_curve(path) == mixed_curve
    assert [p.name for p in tmp_path.iterdir()] == ['curve.json']
