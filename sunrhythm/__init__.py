"""
sunrhythm - daily schedules derived from the local day/night cycle.
"""

__version__ = "0.1.0"
