"""
Exception types raised while reading phase sheets.

Two families are kept apart on purpose:

- SheetError and its subclasses describe bad or incompatible *data* (a
  corrupt header, a truncated payload, a buffer sized for another layout).
  Callers may catch these and skip the file.
- IllegalStateError describes a *programming* error in the caller, such as
  reading into a buffer that is still open. It is not a SheetError, so a
  handler for data problems never hides it.

File-system failures are left as the builtin OSError.
"""

from __future__ import annotations


class SheetError(Exception):
    """Base class for recoverable phase sheet data errors."""


class FormatError(SheetError):
    """The file does not match the expected binary layout."""


class IllegalStateError(RuntimeError):
    """A buffer was used out of order (double read or double close)."""
