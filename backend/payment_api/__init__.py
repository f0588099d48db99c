"""Account and payment-order backend for the Mahndi storefront."""

from .app import create_app

__all__ = ["create_app"]
