#!/usr/bin/env python3
"""
CLI entry point for the pclconvert.cli module.

This allows running: python -m pclconvert.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
