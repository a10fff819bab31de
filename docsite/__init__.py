"""Build and serve single-page documentation sites from Markdown trees."""

__version__ = "0.1.0"
