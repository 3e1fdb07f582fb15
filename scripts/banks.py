#!/usr/bin/env python3
"""
Lista el catálogo de bancos del formulario de CEP, o busca un código por nombre.

Uso:
    python scripts/banks.py
    python scripts/banks.py --name "BANAMEX"
"""

import argparse
import json
import sys
from pathlib import Path

# Agregar directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cep_query.exceptions import CEPQueryError
from cep_query.service import CEPQueryService


def main():
    """Función principal."""
    parser = argparse.ArgumentParser(description="Catálogo de bancos del sitio de CEP de Banxico")
    parser.add_argument("--name", default=None, help="Nombre (o parte) del banco a buscar")
    args = parser.parse_args()

    service = CEPQueryService()

    try:
        if args.name:
            code = service.get_bank_code_by_name(args.name)
            if code is None:
                print(f"❌ Banco no encontrado: {args.name}")
                sys.exit(1)
            print(f"🏦 {args.name} → {code}")
            return

        banks = service.get_bank_options()
    except CEPQueryError as e:
        print(f"❌ Error obteniendo bancos: {e}")
        sys.exit(1)

    print(f"🏦 Bancos encontrados: {len(banks)}")
    print(json.dumps(banks, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
