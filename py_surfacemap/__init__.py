"""
Surface map projections and climate classification for terrestrial planets.
"""

__version__ = "0.1.0"
