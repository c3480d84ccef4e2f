"""
CUPS Spooler
============

Raw printing on Linux/macOS through the CUPS command line tools.

CUPS has no page-level API for raw queues, so a job buffers everything
written between begin_job and end_job and submits it in one `lp -o raw`
call when the job ends.
"""

import subprocess
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .base import BaseSpooler, SpoolerError
from ..models import PrintDevice

LPSTAT = 'lpstat'
LP = 'lp'


@dataclass
class CupsHandle:
    """Open CUPS destination and the job being assembled for it."""

    printer: str
    document_name: Optional[str] = None
    buffer: bytearray = field(default_factory=bytearray)
    page_open: bool = False


class CupsSpooler(BaseSpooler):
    """Spooler backend for CUPS (lpstat / lp)."""

    name = "cups"

    def __init__(self, timeout: int = 30):
        self.timeout = timeout

    def _run(self, args: List[str], data: Optional[bytes] = None) -> subprocess.CompletedProcess:
        """Run a CUPS tool, raising SpoolerError on failure."""
        try:
            result = subprocess.run(
                args,
                input=data,
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise SpoolerError(None, f"{args[0]} not found, is CUPS installed?") from e
        except OSError as e:
            raise SpoolerError(e.errno, f"{args[0]}: {e.strerror or e}") from e
        except subprocess.TimeoutExpired as e:
            raise SpoolerError(None, f"{args[0]} timed out after {self.timeout}s") from e

        if result.returncode != 0:
            stderr = result.stderr.decode('utf-8', errors='replace').strip()
            raise SpoolerError(result.returncode, stderr or f"{args[0]} exited with {result.returncode}")
        return result

    def enumerate(self) -> List[PrintDevice]:
        result = self._run([LPSTAT, '-e'])
        out = result.stdout.decode('utf-8', errors='replace')
        return [PrintDevice(name=line.split()[0]) for line in out.splitlines() if line.strip()]

    def open(self, name: str) -> Any:
        # lpstat -p fails for unknown destinations
        self._run([LPSTAT, '-p', name])
        return CupsHandle(printer=name)

    def begin_job(self, handle: CupsHandle, document_name: str) -> Any:
        if handle.document_name is not None:
            raise SpoolerError(None, f"A job is already open on {handle.printer}")
        handle.document_name = document_name
        handle.buffer = bytearray()
        return document_name

    def begin_page(self, handle: CupsHandle) -> None:
        if handle.document_name is None:
            raise SpoolerError(None, "No job open")
        handle.page_open = True

    def write(self, handle: CupsHandle, data: bytes) -> int:
        if not handle.page_open:
            raise SpoolerError(None, "No page open")
        handle.buffer.extend(data)
        return len(data)

    def end_page(self, handle: CupsHandle) -> None:
        handle.page_open = False

    def end_job(self, handle: CupsHandle) -> None:
        data = bytes(handle.buffer)
        document_name = handle.document_name
        handle.document_name = None
        handle.buffer = bytearray()

        if data:
            self._run([LP, '-d', handle.printer, '-o', 'raw', '-t', document_name or 'Print Job'], data)

    def close(self, handle: CupsHandle) -> None:
        handle.document_name = None
        handle.buffer = bytearray()
        handle.page_open = False
