#!/usr/bin/env python3
"""
ticketkeeper - Main Entry Point

Usage:
    python main.py dev          # Development mode
    python main.py prod         # Production mode
    python main.py prod --config path/to/config.yml
"""

from ticketkeeper.bot.__main__ import main


if __name__ == "__main__":
    main()
