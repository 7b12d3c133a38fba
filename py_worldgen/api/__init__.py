"""
HTTP query surface.
"""
