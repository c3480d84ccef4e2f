"""
Tests for the host spooler backends. pywin32 and the CUPS tools are
replaced with fakes so the suite runs on any platform.
"""

import subprocess
import sys
import types
from unittest.mock import MagicMock

import pytest

from escpos_print_agent.session import SpoolerSession
from escpos_print_agent.exceptions import NoDeviceFound, OpenFailed, WriteFailed
from escpos_print_agent.spoolers import (
    SpoolerError, Win32Spooler, CupsSpooler, DummySpooler, get_spooler, create_spooler,
)
from escpos_print_agent.spoolers import cups as cups_module


# =============================================================================
# Registry
# =============================================================================

class TestRegistry:

    def test_named_spoolers(self):
        assert get_spooler('win32') is Win32Spooler
        assert get_spooler('cups') is CupsSpooler
        assert get_spooler('dummy') is DummySpooler

    def test_unknown(self):
        assert get_spooler('nope') is None
        with pytest.raises(ValueError):
            create_spooler('nope')

    def test_auto_picks_native(self, monkeypatch):
        monkeypatch.setattr(sys, 'platform', 'linux')
        assert get_spooler('auto') is CupsSpooler
        monkeypatch.setattr(sys, 'platform', 'win32')
        assert get_spooler('auto') is Win32Spooler

    def test_create_dummy_with_dump_dir(self, tmp_path):
        spooler = create_spooler('dummy', dummy_dir=str(tmp_path))
        assert isinstance(spooler, DummySpooler)
        assert spooler.dump_dir == tmp_path


# =============================================================================
# Dummy
# =============================================================================

class TestDummySpooler:

    def test_records_jobs(self):
        spooler = DummySpooler()
        session = SpoolerSession(spooler)

        session.submit(b'abc')
        session.submit(b'def')

        assert [job['data'] for job in spooler.jobs] == [b'abc', b'def']
        assert spooler.jobs[0]['printer'] == 'Dummy Receipt Printer'

    def test_unknown_printer(self):
        with pytest.raises(SpoolerError) as exc_info:
            DummySpooler().open('Nope')
        assert exc_info.value.code == 1801

    def test_dumps_to_directory(self, tmp_path):
        spooler = DummySpooler(dump_dir=str(tmp_path / 'jobs'))

        SpoolerSession(spooler).submit(b'\x1b\x40hi')

        files = list((tmp_path / 'jobs').glob('*.bin'))
        assert len(files) == 1
        assert files[0].read_bytes() == b'\x1b\x40hi'

    def test_write_without_job(self):
        with pytest.raises(SpoolerError):
            DummySpooler().write('Dummy Receipt Printer', b'x')


# =============================================================================
# CUPS
# =============================================================================

class FakeRun:
    """subprocess.run replacement returning canned results per command."""

    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []

    def __call__(self, args, input=None, capture_output=False, timeout=None):
        self.calls.append((args, input))
        returncode, stdout, stderr = self.results.get(tuple(args[:2]), (0, b'', b''))
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def fake_run(monkeypatch):
    run = FakeRun()
    monkeypatch.setattr(cups_module.subprocess, 'run', run)
    return run


class TestCupsSpooler:

    def test_enumerate(self, fake_run):
        fake_run.results[('lpstat', '-e')] = (0, b'POS-80\nEPSON_TM_T20 \n\n', b'')

        devices = CupsSpooler().enumerate()

        assert [d.name for d in devices] == ['POS-80', 'EPSON_TM_T20']

    def test_enumerate_failure(self, fake_run):
        fake_run.results[('lpstat', '-e')] = (1, b'', b'lpstat: scheduler not responding')

        with pytest.raises(SpoolerError) as exc_info:
            CupsSpooler().enumerate()

        assert exc_info.value.code == 1
        assert 'scheduler' in exc_info.value.message

    def test_open_unknown_printer(self, fake_run):
        fake_run.results[('lpstat', '-p')] = (1, b'', b'lpstat: Invalid destination name')

        with pytest.raises(OpenFailed):
            SpoolerSession(CupsSpooler()).open('Nope')

    def test_job_submitted_raw_on_end(self, fake_run):
        session = SpoolerSession(CupsSpooler(), device_name='POS-80', document_name='Ticket')

        session.submit(b'\x1b\x40hi\n')

        args, data = fake_run.calls[-1]
        assert args == ['lp', '-d', 'POS-80', '-o', 'raw', '-t', 'Ticket']
        assert data == b'\x1b\x40hi\n'

    def test_lp_failure_is_write_failed(self, fake_run):
        fake_run.results[('lp', '-d')] = (2, b'', b'lp: Unable to print')
        session = SpoolerSession(CupsSpooler(), device_name='POS-80')

        with pytest.raises(WriteFailed) as exc_info:
            session.submit(b'abc')

        assert exc_info.value.host_error == 2

    def test_missing_tools(self, monkeypatch):
        def missing(*args, **kwargs):
            raise FileNotFoundError('lpstat')

        monkeypatch.setattr(cups_module.subprocess, 'run', missing)

        with pytest.raises(SpoolerError):
            CupsSpooler().enumerate()

    def test_tool_not_executable(self, monkeypatch):
        def denied(*args, **kwargs):
            raise PermissionError(13, 'Permission denied', args[0][0])

        monkeypatch.setattr(cups_module.subprocess, 'run', denied)

        with pytest.raises(NoDeviceFound) as exc_info:
            SpoolerSession(CupsSpooler()).submit(b'abc')

        assert exc_info.value.host_error == 13

    def test_lp_os_error_is_write_failed(self, fake_run, monkeypatch):
        def run(args, **kwargs):
            if args[0] == 'lp':
                raise OSError(7, 'Argument list too long')
            return fake_run(args, **kwargs)

        monkeypatch.setattr(cups_module.subprocess, 'run', run)
        session = SpoolerSession(CupsSpooler(), device_name='POS-80')

        with pytest.raises(WriteFailed) as exc_info:
            session.submit(b'abc')

        assert exc_info.value.host_error == 7

    def test_write_requires_page(self):
        spooler = CupsSpooler()
        handle = cups_module.CupsHandle(printer='POS-80')

        with pytest.raises(SpoolerError):
            spooler.write(handle, b'x')


# =============================================================================
# Win32
# =============================================================================

class FakeWinError(Exception):
    """Stand-in for pywintypes.error."""

    def __init__(self, winerror, funcname, strerror):
        super().__init__(winerror, funcname, strerror)
        self.winerror = winerror
        self.funcname = funcname
        self.strerror = strerror


@pytest.fixture
def win32print(monkeypatch):
    module = types.ModuleType('win32print')
    module.PRINTER_ENUM_LOCAL = 2
    module.PRINTER_ENUM_CONNECTIONS = 4
    module.PRINTER_ACCESS_USE = 8
    module.EnumPrinters = MagicMock(return_value=[
        (8388608, 'EPSON TM-T20,EPSON TM-T20,', 'EPSON TM-T20', ''),
        (8388608, 'POS-80,POS-80,', 'POS-80', ''),
    ])
    module.OpenPrinter = MagicMock(return_value='hprinter')
    module.StartDocPrinter = MagicMock(return_value=42)
    module.StartPagePrinter = MagicMock()
    module.WritePrinter = MagicMock(side_effect=lambda handle, data: len(data))
    module.EndPagePrinter = MagicMock()
    module.EndDocPrinter = MagicMock()
    module.ClosePrinter = MagicMock()

    pywintypes = types.ModuleType('pywintypes')
    pywintypes.error = FakeWinError

    monkeypatch.setitem(sys.modules, 'win32print', module)
    monkeypatch.setitem(sys.modules, 'pywintypes', pywintypes)
    monkeypatch.setattr(Win32Spooler, '_check_dependencies', lambda self: None)
    return module


class TestWin32Spooler:

    def test_requires_windows(self, monkeypatch):
        monkeypatch.setattr(sys, 'platform', 'linux')
        with pytest.raises(RuntimeError):
            Win32Spooler()

    def test_enumerate(self, win32print):
        devices = Win32Spooler().enumerate()

        assert [d.name for d in devices] == ['EPSON TM-T20', 'POS-80']
        win32print.EnumPrinters.assert_called_once_with(2 | 4)

    def test_full_job(self, win32print):
        session = SpoolerSession(Win32Spooler(), document_name='Print Job')

        session.submit(b'data')

        win32print.OpenPrinter.assert_called_once_with('EPSON TM-T20', {'DesiredAccess': 8})
        win32print.StartDocPrinter.assert_called_once_with('hprinter', 1, ('Print Job', None, 'RAW'))
        win32print.StartPagePrinter.assert_called_once_with('hprinter')
        win32print.WritePrinter.assert_called_once_with('hprinter', b'data')
        win32print.EndPagePrinter.assert_called_once_with('hprinter')
        win32print.EndDocPrinter.assert_called_once_with('hprinter')

        session.close()
        win32print.ClosePrinter.assert_called_once_with('hprinter')

    def test_open_error_code(self, win32print):
        win32print.OpenPrinter.side_effect = FakeWinError(1801, 'OpenPrinter', 'The printer name is invalid.')

        with pytest.raises(OpenFailed) as exc_info:
            SpoolerSession(Win32Spooler()).open('Ghost')

        assert exc_info.value.host_error == 1801

    def test_write_error_still_ends_page_and_doc(self, win32print):
        win32print.WritePrinter.side_effect = FakeWinError(1167, 'WritePrinter', 'The device is not connected.')
        session = SpoolerSession(Win32Spooler())

        with pytest.raises(WriteFailed) as exc_info:
            session.submit(b'data')

        assert exc_info.value.host_error == 1167
        win32print.EndPagePrinter.assert_called_once_with('hprinter')
        win32print.EndDocPrinter.assert_called_once_with('hprinter')
