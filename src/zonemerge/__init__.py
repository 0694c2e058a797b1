"""zonemerge: geometric overlay engine for inside/outside map zones."""

__version__ = "0.1.0"
