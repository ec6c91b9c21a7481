"""Services for strictimpl."""

from strictimpl.services.checker_service import CheckerService, CheckResult

__all__ = ["CheckerService", "CheckResult"]
