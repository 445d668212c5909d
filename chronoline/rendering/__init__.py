"""
Timeline rendering components.

Viewport projection, ruler ticks, culling and QPainter drawing.
"""
