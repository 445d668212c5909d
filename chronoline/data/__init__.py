"""
Timeline Data Layer

Value types for dates and timeline items, and the session state manager.
"""
