"""
Component Resolver - Main entry point

Allows running the CLI as `python -m componentresolver`.
"""

from .cli import cli

if __name__ == "__main__":
    cli()
