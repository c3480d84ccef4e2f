"""
Print Job Models
================

Ticket and barcode jobs built from HTTP request bodies. Jobs are consumed
immediately by the encoder and are never stored.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any

from ..exceptions import ValidationError


@dataclass
class TicketJob:
    """Lines of text printed one per line, followed by a paper cut."""

    lines: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TicketJob':
        """Create from a request body, rejecting anything without a 'lines' list."""
        lines = data.get('lines')
        if not isinstance(lines, list):
            raise ValidationError("Body must contain a 'lines' array")
        if not all(isinstance(line, str) for line in lines):
            raise ValidationError("Every entry of 'lines' must be a string")
        return cls(lines=lines)


@dataclass
class BarcodeJob:
    """EAN-13 class barcodes, repeated ``copies`` times under an optional caption."""

    codes: List[str] = field(default_factory=list)
    copies: int = 1
    text: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BarcodeJob':
        """
        Create from a request body.

        Args:
            data: Body with 'codes' (string or array of strings), optional
                'copies' (default 1) and 'text' (default empty)

        Raises:
            ValidationError: No codes, non-string codes, copies below 1 or
                a non-string caption
        """
        codes = data.get('codes')
        if isinstance(codes, str):
            codes = [codes]
        elif not isinstance(codes, list):
            codes = []

        if not codes:
            raise ValidationError("At least one code is required")
        if not all(isinstance(code, str) for code in codes):
            raise ValidationError("Every entry of 'codes' must be a string")

        copies = data.get('copies', 1)
        # bool is an int subclass; reject it explicitly
        if isinstance(copies, bool) or not isinstance(copies, int):
            raise ValidationError("'copies' must be an integer")
        if copies < 1:
            raise ValidationError("'copies' must be at least 1")

        text = data.get('text', '')
        if text is None:
            text = ''
        if not isinstance(text, str):
            raise ValidationError("'text' must be a string")

        return cls(codes=codes, copies=copies, text=text)
