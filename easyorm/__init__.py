"""A small ORM: model registry, SELECT building, dialects, transactions and row mapping."""

__version__ = "0.1.0"