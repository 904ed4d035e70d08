"""
PtzDeck - VISCA-over-IP PTZ control core for the live-video operator console
"""

__version__ = "0.1.0"
