class BezfitError(Exception):
    """Base class for all errors raised by bezfit."""


class InvalidInputError(BezfitError, ValueError):
    """Structurally invalid input: too few samples, malformed parameters,
    bad options, or a curve whose segments do not join up or close."""


class ParseError(BezfitError, ValueError):
    """Malformed textual curve data (JSON points or SVG path syntax)."""
