"""
Utilidades para normalizar valores escalares del payload.

Los valores llegan como JSON arbitrario (string, numero, booleano o null)
y se guardan en columnas TEXT, por lo que se normalizan a texto antes de
persistir o escribir en la hoja.
"""
import json
import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional


def to_text(value: Any) -> Optional[str]:
    """
    Convierte un valor escalar a su representacion textual.

    - None se mantiene como None (NULL en base de datos)
    - bool -> "TRUE" / "FALSE" (mismo formato que usa Google Sheets)
    - float entero -> sin decimales (42.0 -> "42")
    - dict/list -> JSON compacto
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        return format(value.normalize(), "f") if value == value.to_integral() else str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def to_cell(value: Any) -> str:
    """Valor listo para una celda: NULL se escribe como cadena vacia."""
    text = to_text(value)
    return "" if text is None else text


def normalize_record(record: Dict[str, Any]) -> Dict[str, Optional[str]]:
    """Normaliza todos los valores de un registro a texto."""
    return {str(key): to_text(value) for key, value in record.items()}


def strip_columns(record: Dict[str, Any], columns: Iterable[str]) -> Dict[str, Any]:
    """Retorna una copia del registro sin las columnas indicadas."""
    excluded = set(columns)
    return {k: v for k, v in record.items() if k not in excluded}
