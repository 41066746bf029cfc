"""JSON HTTP API that stores pack sizes in MongoDB and works out the packs needed for an order."""

__version__ = "0.1.0"