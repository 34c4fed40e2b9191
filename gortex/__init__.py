"""Building blocks for HTTP services: contexts, errors, middleware, request IDs, clients and pools."""

__version__ = "0.1.0"