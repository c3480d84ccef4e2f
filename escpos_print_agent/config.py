"""
ESC/POS Print Agent Configuration
"""

import os

# =============================================================================
# Server Configuration
# =============================================================================

PORT = int(os.environ.get('ESCPOS_AGENT_PORT', 9999))
HOST = os.environ.get('ESCPOS_AGENT_HOST', '0.0.0.0')
DEBUG = os.environ.get('ESCPOS_AGENT_DEBUG', 'false').lower() == 'true'

# API Key for authentication (empty disables the check)
API_KEY = os.environ.get('ESCPOS_AGENT_API_KEY', '')

# CORS preflight cache (seconds)
CORS_MAX_AGE = 3600

# =============================================================================
# Printer Defaults
# =============================================================================

# Explicit device name; empty means "first enumerated device"
PRINTER_NAME = os.environ.get('ESCPOS_AGENT_PRINTER', '')

# Spooler backend: auto, win32, cups, dummy
SPOOLER = os.environ.get('ESCPOS_AGENT_SPOOLER', 'auto').lower()

# Document name shown in the host print queue
DOCUMENT_NAME = os.environ.get('ESCPOS_AGENT_DOCUMENT_NAME', 'Print Job')

# Where the dummy backend dumps received jobs (empty keeps them in memory only)
DUMMY_DIR = os.environ.get('ESCPOS_AGENT_DUMMY_DIR', '')

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = os.environ.get('ESCPOS_AGENT_LOG_LEVEL', 'INFO').upper()
LOG_DIR = os.environ.get('ESCPOS_AGENT_LOG_DIR', '')


def as_dict() -> dict:
    """Snapshot of the settings consumed by create_app()."""
    return {
        'API_KEY': API_KEY,
        'CORS_MAX_AGE': CORS_MAX_AGE,
        'PRINTER_NAME': PRINTER_NAME,
        'SPOOLER': SPOOLER,
        'DOCUMENT_NAME': DOCUMENT_NAME,
        'DUMMY_DIR': DUMMY_DIR,
    }
