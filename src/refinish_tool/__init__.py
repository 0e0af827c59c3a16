"""
Refinish Tool Package

Order intake and price estimation for golf club refinishing
(paint fill, strip & redo, grip installation).
Resolves an order specification to a price range using a fixed price table.
"""

__version__ = "1.0.0"
