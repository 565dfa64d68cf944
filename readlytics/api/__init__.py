"""
API package - JSON endpoints for the analytics engine.
"""
