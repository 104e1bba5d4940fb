"""
Natural Remedy Bridge - deterministic matching engine that recommends
natural-remedy alternatives for pharmaceutical drugs.
"""

__version__ = "0.1.0"
__author__ = "Natural Remedy Bridge Team"
