"""
Posta - Humanitarian Aid Case Governance Core

Records aid claims ("cases"), screens them for fraud, routes them to an
executing organization and confirms them through independent verifier
agreement before they become authoritative.

Lifecycle:
- intake -> integrity check -> sequence validation
- routing -> consensus verification -> ledger commit

Every transition is committed to a content-hashed, signed audit ledger.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
