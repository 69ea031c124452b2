"""Gate and apply upstream AUR updates to custom package repositories."""

__version__ = "0.1.0"
