"""Category and SKU lookups used by the commit engine."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from django.db import IntegrityError, transaction

from ....catalog.models import Category, Product
from ....catalog.utils import slugify_name
from ..constants import ImportErrorCode
from ..types import ImportSettings
from .errors import RowFailure

logger = logging.getLogger(__name__)

MAX_SLUG_SUFFIX = 5


def _slug_candidates(name: str) -> list[str]:
    base_slug = slugify_name(name)
    candidates = [base_slug] + [f"{base_slug}-{suffix}" for suffix in range(1, MAX_SLUG_SUFFIX + 1)]
    candidates.append(f"{base_slug}-{uuid.uuid4().hex[:8]}")
    return candidates


class CategoryResolver:
    """
    Resolve category names to ``Category`` rows for the duration of one job run.

    Lookups are case-insensitive and cached, so a file with thousands of rows
    in the same category issues a single query for it. Categories created
    while writing a row stay pending until that row's savepoint commits:
    call ``commit_pending`` after a successful row and ``discard_pending``
    after a rolled back one.
    """

    def __init__(self, settings: ImportSettings):
        self.settings = settings
        self._cache: dict[str, Optional[Category]] = {}
        self._pending: dict[str, Category] = {}

    def resolve(
        self,
        name: Optional[str],
        *,
        row_number: Optional[int] = None,
        create: bool = True,
    ) -> Optional[Category]:
        """
        Return the category called ``name``.

        With ``create=False`` a missing category is not created; the row only
        fails when it could never have been created or linked.
        """
        if not name:
            return None
        key = name.strip().lower()
        if key in self._pending:
            return self._pending[key]
        if key in self._cache:
            category = self._cache[key]
        else:
            category = self._find(name)
            if category is not None or not self.settings.create_missing_categories:
                self._cache[key] = category

        if category is None and self.settings.create_missing_categories:
            if not create:
                return None
            category = self._create(name.strip())
            self._pending[key] = category
            return category

        if category is None and self.settings.validate_categories:
            raise RowFailure.single(
                ImportErrorCode.CATEGORY_NOT_FOUND,
                f"Category '{name}' does not exist",
                row_number=row_number,
            )
        return category

    def commit_pending(self) -> None:
        self._cache.update(self._pending)
        self._pending.clear()

    def discard_pending(self) -> None:
        self._pending.clear()

    @staticmethod
    def _find(name: str) -> Optional[Category]:
        return Category.objects.filter(name__iexact=name.strip()).order_by("pk").first()

    def _create(self, name: str) -> Category:
        last_error: Optional[IntegrityError] = None
        for slug in _slug_candidates(name):
            try:
                with transaction.atomic():
                    category = Category.objects.create(name=name, slug=slug)
            except IntegrityError as exc:
                last_error = exc
                # Another writer may have created the same category meanwhile
                existing = self._find(name)
                if existing is not None:
                    return existing
                continue
            logger.info("Created category '%s' (slug=%s) during import", name, slug)
            return category
        raise last_error


def find_product_by_sku(sku: Optional[str]) -> Optional[Product]:
    if not sku:
        return None
    return Product.objects.filter(sku=sku.strip()).first()
