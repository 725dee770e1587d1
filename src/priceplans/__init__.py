"""Smart-meter electricity cost estimation and price plan comparison."""

__version__ = "0.1.0"
