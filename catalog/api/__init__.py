"""
API module for the catalog service.

Exposes the product search, product detail and filter option endpoints.
"""
