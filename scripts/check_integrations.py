"""Check the catalog backend and the curated garment image hosts."""

from __future__ import annotations

import asyncio
import sys

from stylecart.integrations import IntegrationCheckResult, run_all_checks
from stylecart.monitoring.logging import configure_logging


def _format_result(result: IntegrationCheckResult) -> str:
    status = "✅" if result.success else "❌"
    return f"{status} {result.name} ({result.elapsed_ms:.0f} ms): {result.message}"


def main() -> int:
    configure_logging()
    results = asyncio.run(run_all_checks())
    for result in results:
        print(_format_result(result))
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
