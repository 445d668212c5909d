"""
Timeline Containment

This module derives the structural relationships between timeline items:
which frame and period tightly enclose each event and period.
"""

from .containment_resolver import Containment, ContainmentResolver

__all__ = ['Containment', 'ContainmentResolver']
