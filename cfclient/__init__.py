"""Transport, data types and operation mixins for the Codefresh API."""

__version__ = "0.2.1"