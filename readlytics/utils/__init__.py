"""
Utility helpers shared across the analytics service.
"""
