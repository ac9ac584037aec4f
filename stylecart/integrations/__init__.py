"""Integration check helpers."""

from .checks import IntegrationCheckResult, check_catalog, check_tryon_images, run_all_checks

__all__ = ["IntegrationCheckResult", "check_catalog", "check_tryon_images", "run_all_checks"]
