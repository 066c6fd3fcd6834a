"""
foambook - availability and pricing engine for a foam party booking site.
"""

__version__ = "0.1.0"
