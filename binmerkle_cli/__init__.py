"""
binmerkle CLI

Command-line interface for building trees and creating/verifying proofs.

Usage:
    python -m binmerkle_cli build leaves.txt --depth 3
    python -m binmerkle_cli prove leaves.txt 2 --out proof.json
    python -m binmerkle_cli verify proof.json --leaves leaves.txt
"""

__version__ = "0.1.0"
