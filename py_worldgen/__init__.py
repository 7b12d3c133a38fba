"""
Deterministic procedural world generation.
"""

__version__ = "0.1.0"
