"""
FairSplit - Source Package

A two-participant expense splitting calculator. Shared expenses are
tracked across months and each month is settled by comparing what each
participant paid with what each participant should have paid.

DESIGN PRINCIPLES:
1. The balance engine is pure: same input, same output, no hidden state
2. Dates are compared at month granularity on plain integers
3. Bad data is rejected at entry, never silently absorbed by the engine
4. Every change to the expense collection is auditable
5. Storage and presentation live outside this package
"""

__version__ = "1.0.0"
__author__ = "FairSplit Team"
