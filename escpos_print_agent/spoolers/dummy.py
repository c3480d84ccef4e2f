"""
Dummy Spooler
=============

Stand-in for a receipt printer when no hardware is attached.

Completed jobs are kept in memory and, when a directory is configured,
dumped as one ``.bin`` file per job so the ESC/POS stream can be inspected
or replayed to a real printer later.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .base import BaseSpooler, SpoolerError
from ..models import PrintDevice
from ..logging_config import get_logger

logger = get_logger(__name__)


class DummySpooler(BaseSpooler):
    """In-memory spooler backend."""

    name = "dummy"

    def __init__(self, printers: Optional[List[str]] = None, dump_dir: Optional[str] = None):
        self.printers = list(printers) if printers is not None else ['Dummy Receipt Printer']
        self.dump_dir = Path(dump_dir) if dump_dir else None
        self.jobs: List[Dict[str, Any]] = []
        self._open_jobs: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def enumerate(self) -> List[PrintDevice]:
        return [PrintDevice(name=name) for name in self.printers]

    def open(self, name: str) -> Any:
        if name not in self.printers:
            # ERROR_INVALID_PRINTER_NAME
            raise SpoolerError(1801, f"Unknown printer: {name}")
        return name

    def begin_job(self, handle: Any, document_name: str) -> Any:
        with self._lock:
            job_id = len(self.jobs) + len(self._open_jobs) + 1
            self._open_jobs[handle] = {
                'id': job_id,
                'printer': handle,
                'document_name': document_name,
                'data': bytearray(),
                'created_at': datetime.now(),
            }
        return job_id

    def begin_page(self, handle: Any) -> None:
        if handle not in self._open_jobs:
            raise SpoolerError(None, "No job open")

    def write(self, handle: Any, data: bytes) -> int:
        job = self._open_jobs.get(handle)
        if job is None:
            raise SpoolerError(None, "No job open")
        job['data'].extend(data)
        return len(data)

    def end_page(self, handle: Any) -> None:
        pass

    def end_job(self, handle: Any) -> None:
        with self._lock:
            job = self._open_jobs.pop(handle, None)
        if job is None:
            return

        job['data'] = bytes(job['data'])
        self.jobs.append(job)
        logger.info(f"Dummy job {job['id']} on '{handle}': {len(job['data'])} bytes")

        if self.dump_dir:
            self.dump_dir.mkdir(parents=True, exist_ok=True)
            stamp = job['created_at'].strftime('%Y%m%d-%H%M%S')
            path = self.dump_dir / f"job-{stamp}-{job['id']:04d}.bin"
            path.write_bytes(job['data'])
            job['path'] = str(path)

    def close(self, handle: Any) -> None:
        with self._lock:
            self._open_jobs.pop(handle, None)
