"""
Windows Spooler
===============

Raw printing through the Windows print spooler (winspool) via pywin32.

ESC/POS bytes are submitted as a "RAW" datatype document so the printer
driver passes them through untouched.
"""

import sys
from typing import Any, List

from .base import BaseSpooler, SpoolerError
from ..models import PrintDevice


def _host_error(exc: Exception) -> SpoolerError:
    """Translate a pywintypes.error into a SpoolerError."""
    code = getattr(exc, 'winerror', None)
    message = getattr(exc, 'strerror', None) or str(exc)
    return SpoolerError(code, message)


class Win32Spooler(BaseSpooler):
    """Spooler backend for Windows (win32print)."""

    name = "win32"

    def __init__(self):
        self._check_dependencies()

    def _check_dependencies(self):
        """Check if required modules are available."""
        if sys.platform != 'win32':
            raise RuntimeError("Win32 spooler requires Windows")

    def enumerate(self) -> List[PrintDevice]:
        import win32print
        import pywintypes

        try:
            printers = win32print.EnumPrinters(
                win32print.PRINTER_ENUM_LOCAL | win32print.PRINTER_ENUM_CONNECTIONS
            )
        except pywintypes.error as e:
            raise _host_error(e) from e

        # Level 1 tuples: (flags, description, name, comment)
        return [PrintDevice(name=p[2]) for p in printers]

    def open(self, name: str) -> Any:
        import win32print
        import pywintypes

        try:
            return win32print.OpenPrinter(name, {'DesiredAccess': win32print.PRINTER_ACCESS_USE})
        except pywintypes.error as e:
            raise _host_error(e) from e

    def begin_job(self, handle: Any, document_name: str) -> Any:
        import win32print
        import pywintypes

        try:
            return win32print.StartDocPrinter(handle, 1, (document_name, None, 'RAW'))
        except pywintypes.error as e:
            raise _host_error(e) from e

    def begin_page(self, handle: Any) -> None:
        import win32print
        import pywintypes

        try:
            win32print.StartPagePrinter(handle)
        except pywintypes.error as e:
            raise _host_error(e) from e

    def write(self, handle: Any, data: bytes) -> int:
        import win32print
        import pywintypes

        try:
            return win32print.WritePrinter(handle, data)
        except pywintypes.error as e:
            raise _host_error(e) from e

    def end_page(self, handle: Any) -> None:
        import win32print
        import pywintypes

        try:
            win32print.EndPagePrinter(handle)
        except pywintypes.error as e:
            raise _host_error(e) from e

    def end_job(self, handle: Any) -> None:
        import win32print
        import pywintypes

        try:
            win32print.EndDocPrinter(handle)
        except pywintypes.error as e:
            raise _host_error(e) from e

    def close(self, handle: Any) -> None:
        import win32print
        import pywintypes

        try:
            win32print.ClosePrinter(handle)
        except pywintypes.error as e:
            raise _host_error(e) from e
