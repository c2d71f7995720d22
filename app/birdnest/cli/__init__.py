"""CLI module for birdnest.

This module provides the command-line interface using Typer.
"""
