"""
Entry point for running delivery-rust CLI as a module.

Usage: python -m delivery_rust [command] [options]
"""

from delivery_rust.cli.parser import main

if __name__ == "__main__":
    main()
