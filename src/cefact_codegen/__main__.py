"""Entry point: ``python -m cefact_codegen`` runs ``generate`` when given no arguments."""

from __future__ import annotations

import sys

from .cli import app


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    app(args=args or ["generate"], prog_name="cefact-codegen")


if __name__ == "__main__":
    main()
