"""
ESC/POS Print Agent
===================

Local HTTP agent for ESC/POS thermal receipt printers.

Renders tickets and EAN-13 barcode batches as ESC/POS byte streams and
submits them as RAW jobs to the host print spooler (Windows spooler or
CUPS).

Usage:
    python -m escpos_print_agent

API Endpoints:
    GET  /ping           - Health check
    GET  /health         - System info and session state
    GET  /printers       - List printers known to the spooler
    POST /print/ticket   - Print lines of text
    POST /print/barcode  - Print barcodes
"""

__version__ = '1.0.0'
__author__ = 'ESC/POS Print Agent contributors'
