"""Date-range pricing and availability for rental rooms and properties."""

__version__ = "1.0.0"
