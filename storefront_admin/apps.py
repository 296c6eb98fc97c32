"""
Django app configuration for the storefront-admin back office.

This module configures:
- The Django application that owns the catalog and import models
- Validation of the import and task settings at startup
"""

import logging

from django.apps import AppConfig as BaseAppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for storefront-admin."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "storefront_admin"
    verbose_name = "Storefront Admin"
    label = "storefront_admin"

    def ready(self):
        """Validate configuration after Django has loaded."""
        try:
            self._validate_configuration()
            logger.info("Storefront admin initialized")
        except Exception as e:
            logger.error(f"Error initializing storefront admin: {e}")
            if getattr(settings, "DEBUG", False):
                raise

    def _validate_configuration(self):
        """Log configuration problems that would only surface at import time."""
        from .config_proxy import get_setting
        from .extensions.tasks.config import SUPPORTED_BACKENDS, get_task_settings

        backend = get_task_settings().backend
        if backend not in SUPPORTED_BACKENDS:
            logger.warning(
                "Unknown task backend '%s'; imports will fail to schedule. "
                "Supported backends: %s",
                backend,
                ", ".join(sorted(SUPPORTED_BACKENDS)),
            )

        max_size = get_setting("import_settings.max_file_size_bytes")
        if not isinstance(max_size, int) or max_size <= 0:
            logger.warning(
                "import_settings.max_file_size_bytes should be a positive integer, got %r",
                max_size,
            )
