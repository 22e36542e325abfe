"""
Command Line Interface Package

Command Structure:
- budget version / config: utility commands
- budget forecast: expand forecast rules over a window
- budget balance: resolve cash or savings goal balances
- budget import-csv: preview a bank CSV import
- budget similar: look up near-duplicate entries
"""
