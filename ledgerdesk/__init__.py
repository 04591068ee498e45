"""
ledgerdesk - Bulk Transaction Staging for a Personal Finance Ledger

Exposes a double-entry personal finance ledger (accounts, tagged
transactions, multi-currency instruments) as validated, human-friendly
operations, with a two-phase prepare/execute workflow for batches.

DESIGN PRINCIPLES:
1. Preview first, write second
2. Validate the whole batch before anything reaches the ledger
3. Explicit beats derived (an explicit instrument always wins)
4. Every write is auditable
5. The ledger client is swappable
"""

__version__ = "1.0.0"
__author__ = "ledgerdesk Team"
