#!/usr/bin/env python3
"""
Consulta un pago SPEI en el sitio de CEP de Banxico.

Uso:
    # Por número de referencia
    python scripts/query.py --fecha 03/08/2025 --tipo R --criterio 1234567 \\
        --emisor 40002 --receptor 40014 --cuenta 123456789012345678 --monto 1500.00

    # Por clave de rastreo, navegador visible
    python scripts/query.py --fecha 03-08-2025 --tipo T --criterio ABC123 \\
        --emisor 40002 --receptor 40014 --cuenta 123456789012345678 --monto 1500 --no-headless
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Agregar directorio raíz al path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cep_query.exceptions import CEPQueryError, FormDataError
from cep_query.service import CEPQueryService


def main():
    """Función principal."""
    parser = argparse.ArgumentParser(
        description="Consulta un Comprobante Electrónico de Pago (CEP) en Banxico"
    )
    parser.add_argument("--fecha", required=True, help="Fecha del pago (dd-mm-yyyy o dd/mm/yyyy)")
    parser.add_argument(
        "--tipo",
        required=True,
        choices=["T", "R"],
        help="Criterio de búsqueda: T clave de rastreo, R número de referencia"
    )
    parser.add_argument("--criterio", required=True, help="Clave de rastreo o número de referencia")
    parser.add_argument("--emisor", required=True, help="Código del banco emisor")
    parser.add_argument("--receptor", required=True, help="Código del banco receptor")
    parser.add_argument("--cuenta", required=True, help="Cuenta beneficiaria (CLABE)")
    parser.add_argument("--monto", required=True, help="Monto del pago")
    parser.add_argument(
        "--pago-a-banco",
        action="store_true",
        help="Marca la casilla 'Pago a Banco' (el receptor es el banco)"
    )
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Muestra el navegador durante la consulta"
    )
    parser.add_argument(
        "--slow-mo",
        type=int,
        default=None,
        help="Retardo entre acciones del navegador en ms"
    )
    parser.add_argument("--verbose", action="store_true", help="Muestra el log del servicio")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    form_data = {
        "fecha": args.fecha,
        "tipoCriterio": args.tipo,
        "criterio": args.criterio,
        "emisor": args.emisor,
        "receptor": args.receptor,
        "cuenta": args.cuenta,
        "monto": args.monto,
    }
    if args.pago_a_banco:
        form_data["receptorParticipante"] = True

    options = {}
    if args.no_headless:
        options["headless"] = False
    if args.slow_mo is not None:
        options["slowMo"] = args.slow_mo

    print("=" * 60)
    print("🔎 CONSULTA CEP")
    print("=" * 60)
    print(f"📅 Fecha: {args.fecha}")
    print(f"🏦 Emisor → Receptor: {args.emisor} → {args.receptor}")
    print(f"💰 Monto: {args.monto}")
    print()

    service = CEPQueryService()

    try:
        data = service.query_payment(form_data, options or None)
    except FormDataError as e:
        print(f"❌ Datos inválidos: {e}")
        sys.exit(2)
    except CEPQueryError as e:
        print(f"❌ Error en la consulta: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n\n⚠️  Consulta interrumpida por el usuario")
        sys.exit(1)

    if data is None:
        print("⚠️  Sin resultado: el modal no mostró contenido")
    elif data.get("type") == "table":
        print(f"✅ Resultado en tabla: {len(data['rows'])} fila(s)")
    else:
        print(f"✅ Resultado ({data.get('type')})")

    print(json.dumps(data, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
