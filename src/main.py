"""Script de ejecución.

Por qué existe:
- Permite ejecutar la CLI con `python -m main` durante el desarrollo.
- Mantiene un entrypoint simple junto al script `nps`.
"""

from __future__ import annotations

import sys

# Salida UTF-8 en terminales Windows (cp1252 no puede mostrar las tablas).
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
