"""
astrotarget: Lambert targeting, root finding and numerical integration for
astrodynamics.
"""

__version__ = "0.1.0"
