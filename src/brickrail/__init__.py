# -*- coding: utf-8 -*-
"""Parametric curved track segments for 8 mm stud brick systems.

Quick Start:
    >>> from brickrail import CurveParams, build_segment
    >>> segment = build_segment(CurveParams(radius=56, angle=20))
    >>> segment.solid.export("r56_l20.stl")
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("brickrail")
except PackageNotFoundError:  # pragma: no cover - handled when package not installed
    __version__ = "unknown"

from .params import CurveParams, BallastParams
from .config import Calibration, load_calibration
from .segment import TrackSegment, segment_layout, build_segment
from .ballast import BallastPlate, ballast_layout, build_ballast

__all__ = [
    "CurveParams",
    "BallastParams",
    "Calibration",
    "load_calibration",
    "TrackSegment",
    "segment_layout",
    "build_segment",
    "BallastPlate",
    "ballast_layout",
    "build_ballast",
]
