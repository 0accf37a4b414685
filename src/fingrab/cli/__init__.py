"""
Command Line Interface Package

Command Structure:
- fingrab: Main entry point with utility commands (version, config)
- fingrab <bank> transactions: Export transactions as CSV to stdout
- fingrab <bank> accounts: List account IDs

Errors are reported as "Error: <message>" on stderr with exit code 1.
"""
