"""
Module 07 - DIP CLI

Command-line interface for the DIP proof verifier.

Usage:
    python -m dip_cli verify proof.json
    python -m dip_cli encode leaf.json
    python -m dip_cli hashers
    python -m dip_cli config --show
"""

__version__ = "0.1.0"
