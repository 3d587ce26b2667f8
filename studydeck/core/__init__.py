"""
Core module - shared exceptions and dependency wiring.
"""
