"""
Chronoline Timeline Module

This module provides an interactive timeline spanning BCE to CE dates: a
continuous temporal coordinate system, a pannable and zoomable viewport,
an adaptive ruler and containment between events, periods and frames.
"""

__version__ = "1.0.0"
__author__ = "Chronoline Development Team"

from chronoline.correlation.containment_resolver import resolve_containment
from chronoline.rendering.tick_generator import generate_ticks
from chronoline.rendering.viewport import pan_viewport, project_to_percent, zoom_viewport
from chronoline.utils.calendar_math import from_coordinate, to_coordinate

__all__ = [
    'from_coordinate',
    'generate_ticks',
    'pan_viewport',
    'project_to_percent',
    'resolve_containment',
    'to_coordinate',
    'zoom_viewport',
]
