#!/usr/bin/env python3
"""
Convenience entry point for running sunrhythm directly.

Usage: python sunrhythm_cli.py [command] [options]
"""

from sunrhythm.cli.app import app

if __name__ == "__main__":
    app()
