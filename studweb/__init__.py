"""Storage layer for members, clubs, events and feed over a DB-API connection, with database error types."""

__version__ = "0.1.0"