"""Storefront service.

Public product gallery, product detail with a chat ordering link, and a
guarded admin area, all backed by a hosted backend-as-a-service.
"""

__version__ = "0.1.0"
