# app/core/errors.py
from __future__ import annotations


class QuotationError(Exception):
    """Base for domain errors; carries the HTTP status the API answers with."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class QuotationValidationError(QuotationError):
    status_code = 400


class QuotationNotFound(QuotationError):
    status_code = 404


class QuotationForbidden(QuotationError):
    status_code = 403


class InvalidStatusTransition(QuotationError):
    status_code = 400
