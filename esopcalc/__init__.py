"""ESOP Calc - India/US ESOP and US/California income tax calculators."""

__version__ = "0.1.0"
