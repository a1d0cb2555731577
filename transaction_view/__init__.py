"""Filter, sort, page and export blockchain transactions."""

__version__ = "0.1.0"
