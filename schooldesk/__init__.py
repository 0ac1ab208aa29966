"""SchoolDesk: multi-tenant school management API."""

__version__ = "1.0.0"
