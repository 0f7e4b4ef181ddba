"""
Account Book - Source Package

A personal finance ledger kept in a single flat file and driven
from a menu-based text interface.

DESIGN PRINCIPLES:
1. Validate every field before it reaches the ledger
2. Fail early, fail visibly
3. No silent corrections
4. A bad line in the file never takes the rest of the ledger down
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Account Book Team"
