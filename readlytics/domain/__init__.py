"""
Domain layer - Core analytics models.

This module contains the value types shared by the analytics engine,
isolated from external concerns like HTTP transport and frameworks.
"""
