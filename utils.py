import math
import re
import unicodedata
from decimal import Decimal, ROUND_HALF_UP

# Prefijos numéricos que aceptan parseInt/parseFloat del navegador
_INT_PATTERN = re.compile(r'^[+-]?(0[xX][0-9a-fA-F]+|[0-9]+)')
_FLOAT_PATTERN = re.compile(r'^[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?')


def _como_texto(valor):
    if valor is None or isinstance(valor, bool):
        return ''
    return str(valor).strip()


def parse_int(valor, default=0):
    """
    Entero en base 10 a partir del prefijo numérico del valor ("12abc" -> 12, "3.9" -> 3).
    Valores ausentes, no numéricos o cero devuelven `default`.
    """
    match = _INT_PATTERN.match(_como_texto(valor))
    if not match:
        return default
    texto = match.group(0)
    if texto.lstrip('+-')[:2].lower() == '0x':
        numero = int(texto, 16)
    else:
        numero = int(texto, 10)
    return numero or default


def parse_float(valor, default=0.0):
    """Flotante a partir del prefijo numérico del valor; no numérico o cero -> `default`."""
    match = _FLOAT_PATTERN.match(_como_texto(valor))
    if not match:
        return default
    numero = float(match.group(0))
    if not math.isfinite(numero):
        return default
    return numero or default


def formatear_mxn(valor):
    """Formatea como moneda MXN con 2 decimales ("$1,234.50"). Lo no numérico se muestra como $0.00."""
    numero = Decimal(str(parse_float(valor))).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    signo = '-' if numero < 0 else ''
    return f"{signo}${abs(numero):,.2f}"


def clave_locale(texto):
    """Clave de orden que imita la comparación de cadenas en español (acentos y mayúsculas secundarios)."""
    texto = texto or ''
    base = texto.casefold().replace('ñ', 'n~')
    base = ''.join(
        c for c in unicodedata.normalize('NFKD', base)
        if not unicodedata.combining(c)
    )
    return (base, texto.casefold(), tuple(c.isupper() for c in texto))
