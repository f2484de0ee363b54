"""Convert CSV-exported database slow logs into newline-delimited JSON."""

__version__ = "0.1.0"
