"""
Shared fixtures: a recording fake spooler, a session on top of it and a
Flask test client wired to that session.
"""

import threading
import time
from collections import Counter

import pytest

from escpos_print_agent.app import create_app
from escpos_print_agent.models import PrintDevice
from escpos_print_agent.session import SpoolerSession
from escpos_print_agent.spoolers import BaseSpooler, SpoolerError


class FakeSpooler(BaseSpooler):
    """
    Host spooler double.

    Records every call as (thread name, step), counts successful steps and
    raises SpoolerError for the steps listed in ``fail`` (step -> host code).
    """

    name = "fake"

    def __init__(self, printers=('Receipt Printer',), fail=None, write_delay=0.0,
                 short_write=False):
        self.printers = list(printers)
        self.fail = dict(fail or {})
        self.write_delay = write_delay
        self.short_write = short_write
        self.calls = []
        self.ok = Counter()
        self.written = []
        self.closed_handles = []
        self._lock = threading.Lock()

    def _step(self, step):
        with self._lock:
            self.calls.append((threading.current_thread().name, step))
        if step in self.fail:
            raise SpoolerError(self.fail[step], f"{step} failed")
        with self._lock:
            self.ok[step] += 1

    @property
    def steps(self):
        return [step for _, step in self.calls]

    def enumerate(self):
        self._step('enumerate')
        return [PrintDevice(name=name) for name in self.printers]

    def open(self, name):
        if name not in self.printers:
            with self._lock:
                self.calls.append((threading.current_thread().name, 'open'))
            raise SpoolerError(1801, f"Unknown printer: {name}")
        self._step('open')
        return f"handle:{name}"

    def begin_job(self, handle, document_name):
        self._step('begin_job')
        return len(self.written) + 1

    def begin_page(self, handle):
        self._step('begin_page')

    def write(self, handle, data):
        if self.write_delay:
            time.sleep(self.write_delay)
        self._step('write')
        self.written.append(data)
        return len(data) - 1 if self.short_write else len(data)

    def end_page(self, handle):
        self._step('end_page')

    def end_job(self, handle):
        self._step('end_job')

    def close(self, handle):
        self._step('close')
        self.closed_handles.append(handle)


@pytest.fixture
def fake_spooler():
    return FakeSpooler()


@pytest.fixture
def session(fake_spooler):
    return SpoolerSession(fake_spooler)


@pytest.fixture
def app(session):
    app = create_app(session=session, config={'API_KEY': ''})
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
