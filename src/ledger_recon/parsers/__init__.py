"""Parsers for ledger files."""

from .ledger_parser import LedgerParser

__all__ = ["LedgerParser"]
