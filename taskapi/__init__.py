"""Task management API: Users and Tasks over a durable or in-memory store."""

__version__ = "1.0.0"
