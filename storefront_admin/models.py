"""
Model registry for storefront-admin.

Importing the catalog and import models here lets Django's app loading
register them under the ``storefront_admin`` label.
"""

from storefront_admin.catalog.models import Category, Product
from storefront_admin.extensions.importing.models import ImportJob, ImportRowError

__all__ = ["Category", "Product", "ImportJob", "ImportRowError"]
