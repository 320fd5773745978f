"""Client for fetching and parsing user records from Active Directory."""

__version__ = "0.2.0"
