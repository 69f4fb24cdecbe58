"""Domain errors and their HTTP rendering.

Every action in the API either succeeds or raises one of these. The handler
registered in ``clinic_stock.main`` turns them into
``{"detail": <message>, "next": <view>}`` so a front end can route the user
without the services knowing anything about navigation.
"""

from __future__ import annotations

from typing import Any


class ClinicStockError(Exception):
    status_code: int = 400
    default_next: str | None = None

    def __init__(self, message: str, next_view: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.next_view = next_view or self.default_next

    def to_response(self) -> dict[str, Any]:
        return {"detail": self.message, "next": self.next_view}


class ValidationError(ClinicStockError):
    """Malformed user input (name, quantity, type, threshold)."""

    status_code = 422


class Forbidden(ClinicStockError):
    """Role-gated action attempted by a non-owner."""

    status_code = 403
    default_next = "/dashboard"


class NoTenant(ClinicStockError):
    """The identity has no clinic yet; route it to setup."""

    status_code = 409
    default_next = "/setup"

    def __init__(self, message: str = "No clinic selected", next_view: str | None = None) -> None:
        super().__init__(message, next_view)


class InvalidOrExpired(ClinicStockError):
    """Invitation token is unknown, already used or past expiry."""

    status_code = 410


class NotFound(ClinicStockError):
    status_code = 404


class BackendFailure(ClinicStockError):
    """A read or write against the store failed (e.g. unique name conflict)."""

    status_code = 409
