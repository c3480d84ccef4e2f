"""
Base Spooler
============

Abstract interface to the host print spooler.

A backend exposes the raw-job protocol the host understands: enumerate
devices, open one, then begin job / begin page / write / end page / end job
for every document, and finally close the device. Backends hold no session
state of their own; SpoolerSession owns the handle and call order.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from ..models import PrintDevice


class SpoolerError(Exception):
    """A host spooler call failed."""

    def __init__(self, code: Optional[int] = None, message: str = ""):
        super().__init__(message or f"Spooler error {code}")
        self.code = code
        self.message = message


class BaseSpooler(ABC):
    """Abstract base class for host spooler backends."""

    name = "base"

    @abstractmethod
    def enumerate(self) -> List[PrintDevice]:
        """
        List the printers registered with the host.

        Returns:
            Devices in the host's enumeration order

        Raises:
            SpoolerError: Enumeration failed
        """
        pass

    @abstractmethod
    def open(self, name: str) -> Any:
        """
        Open a printer for raw output.

        Returns:
            Opaque handle passed to every other call

        Raises:
            SpoolerError: The host rejected the printer
        """
        pass

    @abstractmethod
    def begin_job(self, handle: Any, document_name: str) -> Any:
        """Start a RAW document and return the host job id."""
        pass

    @abstractmethod
    def begin_page(self, handle: Any) -> None:
        pass

    @abstractmethod
    def write(self, handle: Any, data: bytes) -> int:
        """Transfer bytes to the open page. Returns the number of bytes written."""
        pass

    @abstractmethod
    def end_page(self, handle: Any) -> None:
        pass

    @abstractmethod
    def end_job(self, handle: Any) -> None:
        pass

    @abstractmethod
    def close(self, handle: Any) -> None:
        """Release the printer handle."""
        pass
