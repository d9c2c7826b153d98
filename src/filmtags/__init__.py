"""Film metadata scraping and Matroska tag serialization."""

__version__ = "0.1.0"
