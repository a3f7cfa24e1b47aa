"""Script de ejecución.

Por qué existe:
- Permite ejecutar la CLI con `python -m main` desde `src/` durante desarrollo.
- El entrypoint instalado es el script `gplay` (pyproject).
"""

from __future__ import annotations

import sys

# Evita UnicodeEncodeError en terminales Windows (cp1252) al imprimir tablas Rich.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
