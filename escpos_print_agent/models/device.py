"""
Print Device Model
==================

A printer registered with the host spooler.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PrintDevice:
    """Printer as reported by the host registry (name is unique there)."""

    name: str

    def __str__(self) -> str:
        return self.name
