"""Building blocks for scanning, tracking, filtering and reporting open network ports."""

__version__ = "0.1.0"