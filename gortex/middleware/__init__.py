"""Middleware for errors, recovery, logging, request IDs, CORS and token or session authentication."""