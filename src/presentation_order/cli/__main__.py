#!/usr/bin/env python3
"""
CLI entry point for presentation_order.cli module.

This allows running: python -m presentation_order.cli
"""

from .main import cli

if __name__ == "__main__":
    cli()
