"""Catalog store: categories and products owned by the storefront."""

from .models import Category, Product
from .utils import slugify_name

__all__ = ["Category", "Product", "slugify_name"]
