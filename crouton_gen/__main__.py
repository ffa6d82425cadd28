# File: crouton_gen/__main__.py
"""
Crouton Gen — Module entry point.

Allows running the generator directly via::

    python -m crouton_gen shop products --fields-file products.json

This module simply delegates to ``crouton_gen.cli.cli_main``.
"""

from __future__ import annotations


def main() -> None:
    """Delegate to the CLI main function."""
    from crouton_gen.cli import cli_main
    cli_main()


if __name__ == "__main__":
    main()
