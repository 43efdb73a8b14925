"""
Error kinds raised while composing a frame.

Every one of them aborts the current composition pass before the display is
flushed, so the panel keeps showing the previous frame.
"""


class MetricDisplayError(Exception):
    """Base class for rendering failures"""


class LengthMismatch(MetricDisplayError):
    """Values and colors of a ratio metric differ in length"""


class CapacityExceeded(MetricDisplayError):
    """A unit distribution needs more pixels than a column holds"""


class MetricNotImplemented(MetricDisplayError, NotImplementedError):
    """A reserved metric variant was supplied"""


class HardwareError(MetricDisplayError):
    """The display surface could not accept writes or flush"""


class GridOverflow(MetricDisplayError):
    """Metrics need more columns than the grid has"""
