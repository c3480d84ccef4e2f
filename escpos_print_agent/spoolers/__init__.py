"""
ESC/POS Print Agent Spoolers
============================

Host spooler backends. Which one is used is picked by configuration
(``ESCPOS_AGENT_SPOOLER``); ``auto`` selects the native spooler.
"""

import sys
from typing import Optional

from .base import BaseSpooler, SpoolerError
from .win32 import Win32Spooler
from .cups import CupsSpooler
from .dummy import DummySpooler

__all__ = [
    'BaseSpooler', 'SpoolerError', 'Win32Spooler', 'CupsSpooler', 'DummySpooler',
    'get_spooler', 'create_spooler',
]

# Spooler registry
SPOOLERS = {
    'win32': Win32Spooler,
    'cups': CupsSpooler,
    'dummy': DummySpooler,
}


def get_spooler(spooler_type: str) -> Optional[type]:
    """Get spooler class by type ('auto' resolves to the native one)."""
    if spooler_type == 'auto':
        spooler_type = 'win32' if sys.platform == 'win32' else 'cups'
    return SPOOLERS.get(spooler_type)


def create_spooler(spooler_type: str, dummy_dir: str = '') -> BaseSpooler:
    """Instantiate the configured backend."""
    spooler_class = get_spooler(spooler_type)
    if spooler_class is None:
        raise ValueError(f"Unknown spooler '{spooler_type}'. Valid: auto, {', '.join(SPOOLERS)}")
    if spooler_class is DummySpooler:
        return DummySpooler(dump_dir=dummy_dir or None)
    return spooler_class()
