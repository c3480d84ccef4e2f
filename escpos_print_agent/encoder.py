"""
ESC/POS Encoder
===============

Builds the raw byte streams sent to ESC/POS thermal printers.

Only the command subset the agent needs is covered: initialize, font A,
alignment, line feed, full cut and GS k barcodes. Everything here is pure;
the bytes are handed to a SpoolerSession by the caller.
"""

from typing import Iterable, Union

from .models import TicketJob, BarcodeJob

Text = Union[str, bytes]


class ESCPOSEncoder:
    """Stateless ESC/POS command builder."""

    # ESC/POS commands
    INIT = b'\x1b\x40'  # Initialize printer
    FONT_A = b'\x1b\x4d\x00'  # Default font
    FEED = b'\x0a'  # Line feed
    CUT = b'\x1d\x56\x00'  # Full cut

    # Alignment
    ALIGN_LEFT = b'\x1b\x61\x00'
    ALIGN_CENTER = b'\x1b\x61\x01'

    # GS k m n: m=67 (EAN-13), n=12 payload bytes
    BARCODE_EAN13 = b'\x1d\x6b\x43\x0c'
    BARCODE_LENGTH = 12

    # Feeds needed to move the last line past the cutter blade
    CUTTER_FEEDS = 2

    @staticmethod
    def _to_bytes(value: Text) -> bytes:
        """Raw bytes pass through untouched; text is sent as UTF-8."""
        if isinstance(value, bytes):
            return value
        return value.encode('utf-8')

    @classmethod
    def encode_ticket(cls, lines: Iterable[Text]) -> bytes:
        """
        Encode a ticket.

        Args:
            lines: Lines in print order. No wrapping or codepage conversion
                is applied.

        Returns:
            init + font A + align left, each line + LF, two feeds and a cut.
            An empty ticket still feeds and cuts.
        """
        data = bytearray()
        data.extend(cls.INIT)
        data.extend(cls.FONT_A)
        data.extend(cls.ALIGN_LEFT)

        for line in lines:
            data.extend(cls._to_bytes(line))
            data.extend(cls.FEED)

        data.extend(cls.FEED * cls.CUTTER_FEEDS)
        data.extend(cls.CUT)
        return bytes(data)

    @classmethod
    def encode_barcode(cls, codes: Iterable[str], copies: int = 1, text: Text = '') -> bytes:
        """
        Encode a batch of EAN-13 barcodes.

        Args:
            codes: Code values in print order
            copies: Number of times the whole block is printed (>= 1)
            text: Caption printed above the codes of every copy

        Returns:
            init + align center, then per copy the caption and one barcode
            line per code, then a single cut.

        Raises:
            ValueError: copies is not a positive integer
        """
        if isinstance(copies, bool) or not isinstance(copies, int) or copies < 1:
            raise ValueError(f"copies must be a positive integer, got {copies!r}")

        codes = list(codes)
        caption = cls._to_bytes(text) if text else b''

        data = bytearray()
        data.extend(cls.INIT)
        data.extend(cls.ALIGN_CENTER)

        for _ in range(copies):
            if caption:
                data.extend(caption)
                data.extend(cls.FEED)

            for code in codes:
                data.extend(cls.BARCODE_EAN13)
                data.extend(cls.barcode_payload(code))
                data.extend(cls.FEED)

        data.extend(cls.CUT)
        return bytes(data)

    @classmethod
    def normalize_code(cls, code: str) -> str:
        """
        First 12 characters of ``code``, left-padded with '0'.

        Characters are not checked for being digits.
        """
        return code[:cls.BARCODE_LENGTH].rjust(cls.BARCODE_LENGTH, '0')

    @classmethod
    def barcode_payload(cls, code: str) -> bytes:
        """Normalized code as exactly 12 bytes (non-ASCII becomes '?')."""
        return cls.normalize_code(code).encode('ascii', errors='replace')

    @classmethod
    def ean13_check_digit(cls, code: str) -> int:
        """
        EAN-13 check digit of the normalized code.

        Not part of the printed payload: the printer receives 12 digits only.

        Raises:
            ValueError: The normalized code contains a non-digit
        """
        base = cls.normalize_code(code)
        if not all(ch in '0123456789' for ch in base):
            raise ValueError(f"EAN-13 check digit needs 12 digits, got {base!r}")

        total = sum(int(digit) * (1 if i % 2 == 0 else 3) for i, digit in enumerate(base))
        return (10 - total % 10) % 10

    @classmethod
    def encode_job(cls, job: Union[TicketJob, BarcodeJob]) -> bytes:
        """Encode a job model built by the transport."""
        if isinstance(job, TicketJob):
            return cls.encode_ticket(job.lines)
        if isinstance(job, BarcodeJob):
            return cls.encode_barcode(job.codes, job.copies, job.text)
        raise TypeError(f"Unsupported job type: {type(job).__name__}")


encode_ticket = ESCPOSEncoder.encode_ticket
encode_barcode = ESCPOSEncoder.encode_barcode
normalize_code = ESCPOSEncoder.normalize_code
ean13_check_digit = ESCPOSEncoder.ean13_check_digit
