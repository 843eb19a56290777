"""
On-demand image resizing service.
"""

__version__ = "0.1.0"
