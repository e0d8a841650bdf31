"""regdesk - event registration intake and review API."""

__version__ = "0.1.0"
