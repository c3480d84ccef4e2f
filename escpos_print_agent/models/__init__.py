"""
ESC/POS Print Agent Models
"""

from .device import PrintDevice
from .job import TicketJob, BarcodeJob

__all__ = ['PrintDevice', 'TicketJob', 'BarcodeJob']
