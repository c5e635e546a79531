from typing import Optional

from .utils import frozen_dataclass


@frozen_dataclass
class CoordCartesian:
    xlim: Optional[tuple[float, float]] = None
    ylim: Optional[tuple[float, float]] = None


def coord_cartesian(xlim=None, ylim=None):
    return CoordCartesian(tuple(xlim) if xlim is not None else None, tuple(ylim) if ylim is not None else None)
