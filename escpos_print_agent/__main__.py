"""
Entry point for ``python -m escpos_print_agent``.
"""

from .app import main

if __name__ == '__main__':
    main()
