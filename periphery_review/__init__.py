"""Run Periphery and turn its unused-code report into review annotations."""

__version__ = "0.1.0"
