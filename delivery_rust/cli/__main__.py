"""
Entry point for running delivery-rust CLI as a module.

Usage: python -m delivery_rust.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
