"""Release tooling for the char macOS app."""

__version__ = "0.1.0"
