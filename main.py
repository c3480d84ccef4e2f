#!/usr/bin/env python
"""
ESC/POS Print Agent - Standalone Entry Point

Run directly:
    python main.py

Or with environment variables:
    ESCPOS_AGENT_PORT=9999 ESCPOS_AGENT_PRINTER="EPSON TM-T20" python main.py
"""

import os
import sys

# Ensure package is importable when running directly
if __name__ == '__main__':
    root_dir = os.path.dirname(os.path.abspath(__file__))
    if root_dir not in sys.path:
        sys.path.insert(0, root_dir)

from escpos_print_agent.app import main


if __name__ == '__main__':
    main()
