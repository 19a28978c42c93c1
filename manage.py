#!/usr/bin/env python3
"""Stock Ledger management CLI. See ``stockledger.cli`` for the commands."""

from stockledger.cli import main

if __name__ == "__main__":
    main()
