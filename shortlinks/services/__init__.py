"""
Services module for business logic separation.

This module contains the link store, the allocator (URL shortening) and the
resolver (redirects), keeping them separate from API endpoints and database
models.
"""
