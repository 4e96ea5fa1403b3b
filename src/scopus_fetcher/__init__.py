"""Look up the DOIs of a RIS bibliography export on Scopus."""

__version__ = "1.0.0"
