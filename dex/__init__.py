"""
dex/ - Exchange quoting.

Modules:
- quote_source: QuoteSourceAdapter (one per exchange endpoint)
- adapters: per-protocol call encoding and result decoding
"""

from dex.quote_source import CALLING_CONVENTIONS, QuoteSourceAdapter

__all__ = [
    "CALLING_CONVENTIONS",
    "QuoteSourceAdapter",
]
