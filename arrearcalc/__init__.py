"""Arrear Calc - pay arrear computation for revised government pay scales."""

__version__ = "0.1.0"
