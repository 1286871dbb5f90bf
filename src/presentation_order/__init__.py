"""
presentation-order: keeps each presentation session's groups in a dense 1..N
order with start times derived from their positions.
"""

__version__ = "0.1.0"
