"""Exceptions raised while reading invoice documents."""

from __future__ import annotations


class InvoiceTaxError(Exception):
    """Base class for invoice tax summary errors."""


class DocumentParseError(InvoiceTaxError):
    """A document could not be parsed into a tree."""


class InvoiceDirectoryError(InvoiceTaxError):
    """The input directory does not exist or is not a directory."""
