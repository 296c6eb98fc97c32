"""Storefront back office: catalog models and the bulk product-import pipeline."""

__version__ = "0.1.0"
