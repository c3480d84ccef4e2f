"""
Spooler Session
===============

Owns the connection to one printer and runs the spooler's transactional
write protocol for each encoded stream:

    begin job -> begin page -> write -> end page -> end job

Every begin that succeeded is matched by its end, also when a later step
fails; the spooler otherwise keeps the job open and stalls the queue.

Session state:

    Closed --open()--> Open --close()--> Closed
    Open --submit()--> Open   (submit never opens or closes by itself,
                               except for the lazy open of a closed session)

Calls are serialized with a re-entrant lock, so concurrent requests never
interleave their spooler calls.
"""

import threading
from typing import Any, Callable, Dict, List, Optional

from .exceptions import (
    NoDeviceFound, OpenFailed, JobStartFailed, PageStartFailed, WriteFailed, NotOpen,
)
from .logging_config import get_logger
from .models import PrintDevice
from .spoolers import BaseSpooler, SpoolerError

logger = get_logger(__name__)


class SpoolerSession:
    """Connection to a single printer through a host spooler backend."""

    def __init__(self, spooler: BaseSpooler, device_name: Optional[str] = None,
                 document_name: str = 'Print Job'):
        """
        Args:
            spooler: Host spooler backend
            device_name: Printer used by open() when none is given; empty
                means "first enumerated printer"
            document_name: Document name shown in the host print queue
        """
        self.spooler = spooler
        self.device_name = device_name or None
        self.document_name = document_name

        self._device: Optional[PrintDevice] = None
        self._handle: Any = None
        self._lock = threading.RLock()

    # =========================================================================
    # State
    # =========================================================================

    @property
    def is_open(self) -> bool:
        return self._device is not None

    @property
    def device(self) -> Optional[PrintDevice]:
        return self._device

    def describe(self) -> Dict[str, Any]:
        """Session state for health endpoints."""
        return {
            'is_open': self.is_open,
            'device': self._device.name if self._device else None,
            'spooler': self.spooler.name,
        }

    def __enter__(self) -> 'SpoolerSession':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # =========================================================================
    # Devices
    # =========================================================================

    def list_devices(self) -> List[PrintDevice]:
        """
        Printers registered with the host, in host order.

        Raises:
            NoDeviceFound: Enumeration itself failed
        """
        try:
            return self.spooler.enumerate()
        except SpoolerError as e:
            logger.error(f"Printer enumeration failed: {e}")
            raise NoDeviceFound(e.code, "Printer enumeration failed") from e

    def open(self, device_name: Optional[str] = None) -> PrintDevice:
        """
        Bind the session to a printer. No-op when already open.

        Args:
            device_name: Printer to open; falls back to the configured one,
                then to the first enumerated printer

        Returns:
            The bound device

        Raises:
            NoDeviceFound: No name given and the host has no printers
            OpenFailed: The host rejected the printer
        """
        with self._lock:
            if self._device is not None:
                return self._device

            name = device_name or self.device_name
            if not name:
                devices = self.list_devices()
                if not devices:
                    logger.warning("No printers found")
                    raise NoDeviceFound()
                name = devices[0].name

            try:
                handle = self.spooler.open(name)
            except SpoolerError as e:
                logger.error(f"Error opening printer '{name}': {e}")
                raise OpenFailed(e.code, f"Error opening printer '{name}'") from e

            self._handle = handle
            self._device = PrintDevice(name=name)
            logger.info(f"Printer opened: {name}")
            return self._device

    def close(self) -> None:
        """Release the printer handle. Idempotent; failures are only logged."""
        with self._lock:
            if self._device is None:
                return

            name = self._device.name
            handle = self._handle
            self._device = None
            self._handle = None

            try:
                self.spooler.close(handle)
            except SpoolerError as e:
                logger.warning(f"Error closing printer '{name}': {e}")
            else:
                logger.info(f"Printer closed: {name}")

    # =========================================================================
    # Printing
    # =========================================================================

    def submit(self, stream: bytes, lazy_open: bool = True) -> int:
        """
        Send one encoded stream as a single spooler job.

        Args:
            stream: Raw ESC/POS bytes
            lazy_open: Open the default printer first if the session is closed

        Returns:
            Number of bytes written

        Raises:
            NotOpen: Session is closed and lazy_open is False
            NoDeviceFound, OpenFailed: Lazy open failed
            JobStartFailed, PageStartFailed, WriteFailed: A spooler step failed
        """
        with self._lock:
            if self._device is None:
                if not lazy_open:
                    raise NotOpen()
                self.open()

            return self._run_job(self._handle, bytes(stream))

    def _run_job(self, handle: Any, data: bytes) -> int:
        try:
            job_id = self.spooler.begin_job(handle, self.document_name)
        except SpoolerError as e:
            logger.error(f"StartDoc failed: {e}")
            raise JobStartFailed(e.code) from e

        # From here on every exit path must end the job (and the page once begun)
        try:
            self.spooler.begin_page(handle)
        except SpoolerError as e:
            logger.error(f"StartPage failed: {e}")
            self._cleanup('end_job', self.spooler.end_job, handle)
            raise PageStartFailed(e.code) from e
        except BaseException:
            self._cleanup('end_job', self.spooler.end_job, handle)
            raise

        try:
            written = self.spooler.write(handle, data)
        except SpoolerError as e:
            logger.error(f"Write failed: {e}")
            self._cleanup('end_page', self.spooler.end_page, handle)
            self._cleanup('end_job', self.spooler.end_job, handle)
            raise WriteFailed(e.code) from e
        except BaseException:
            logger.exception("Write aborted")
            self._cleanup('end_page', self.spooler.end_page, handle)
            self._cleanup('end_job', self.spooler.end_job, handle)
            raise

        if written is not None and written != len(data):
            logger.error(f"Short write: {written} of {len(data)} bytes")
            self._cleanup('end_page', self.spooler.end_page, handle)
            self._cleanup('end_job', self.spooler.end_job, handle)
            raise WriteFailed(message=f"Short write: {written} of {len(data)} bytes")

        page_error = self._cleanup('end_page', self.spooler.end_page, handle)
        job_error = self._cleanup('end_job', self.spooler.end_job, handle)
        end_error = page_error or job_error
        if end_error is not None:
            raise WriteFailed(end_error.code, "Spooler rejected end of job") from end_error

        logger.debug(f"Job {job_id}: {len(data)} bytes sent to '{self._device}'")
        return len(data)

    @staticmethod
    def _cleanup(step: str, call: Callable[[Any], None], handle: Any) -> Optional[SpoolerError]:
        """Run an end_* call, returning its error instead of raising it."""
        try:
            call(handle)
        except SpoolerError as e:
            logger.error(f"{step} failed: {e}")
            return e
        return None
