"""
Timeline utilities module.

This package contains utility functions and classes for the timeline:
calendar math, label formatting, text import, click handling and errors.
"""
