import logging
from typing import Any, Dict, List, Tuple

from config import settings
from schemas import ProductoEntry, StockEntry
from utils import parse_int, parse_float


def _registros(payload: Any) -> List[Any]:
    """Extrae el arreglo `datos` de la respuesta de la API externa."""
    if not isinstance(payload, dict) or not isinstance(payload.get('datos'), list):
        raise TypeError("La respuesta de la API externa no contiene un arreglo 'datos'")
    return payload['datos']


def _validar_registro(item: Any) -> Dict[str, Any]:
    if not isinstance(item, dict):
        raise TypeError(f"Registro inválido: se esperaba un objeto y se recibió {type(item).__name__}")
    return item


def _clave(referencia: Any) -> str:
    return referencia if isinstance(referencia, str) else str(referencia)


def resolver_referencia(item: Dict[str, Any]) -> Any:
    return item.get('referencia') or settings.DEFAULTS_PRODUCTO['referencia']


def transformar_producto(item: Any) -> Dict[str, Any]:
    """Convierte un registro plano de producto, sustituyendo cada campo ausente por su placeholder."""
    item = _validar_registro(item)
    entry = {'referencia': resolver_referencia(item)}
    for campo, campo_origen in settings.PRODUCTO_COLS_MAP.items():
        entry[campo] = item.get(campo_origen) or settings.DEFAULTS_PRODUCTO[campo]
    return ProductoEntry.model_validate(entry).model_dump()


def reshape_productos(payload: Any) -> Dict[str, Dict[str, Any]]:
    """
    Agrupa los productos de la API externa por referencia.
    Si dos registros comparten referencia, el último sobrescribe al anterior.
    """
    resultado = {}
    for item in _registros(payload):
        entry = transformar_producto(item)
        resultado[_clave(entry['referencia'])] = entry
    logging.info(f"Productos transformados: {len(resultado)} referencias.")
    return resultado


def transformar_almacenes(almacenes: Any) -> Dict[str, Dict[str, Any]]:
    # Sin arreglo de almacenes no hay forma de construir el registro: se propaga el error
    if not isinstance(almacenes, (list, tuple)):
        raise TypeError(f"'almacenes' no es iterable (se recibió {type(almacenes).__name__})")
    resultado = {}
    for almacen in almacenes:
        almacen = _validar_registro(almacen)
        resultado[str(almacen.get('almacen_clave'))] = {
            'nombre': almacen.get('almacen'),
            'stock': parse_int(almacen.get('stock'))
        }
    return resultado


def transformar_stock(item: Any) -> Dict[str, Any]:
    """Convierte un registro de stock/precio con coerción numérica y mapa de almacenes."""
    item = _validar_registro(item)
    entry = {
        'referencia': resolver_referencia(item),
        'existencia': parse_int(item.get('stock')),
        'costo': parse_float(item.get('precio')),
        'oferta': parse_float(item.get('precio_oferta')),
        'almacenes': transformar_almacenes(item.get('almacenes'))
    }
    return StockEntry.model_validate(entry).model_dump()


def reshape_stocks_precios(payload: Any) -> Dict[str, Dict[str, Any]]:
    """
    Agrupa stock y precios por referencia. Todo o nada: un registro
    mal formado aborta la transformación completa.
    """
    resultado = {}
    for item in _registros(payload):
        entry = transformar_stock(item)
        resultado[_clave(entry['referencia'])] = entry
    logging.info(f"Stock y precios transformados: {len(resultado)} referencias.")
    return resultado


def reshape_stocks_precios_aislado(payload: Any) -> Tuple[Dict[str, Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Variante que aísla los registros mal formados: devuelve el mapa de los
    registros válidos y la lista de los omitidos con su índice y el error.
    """
    resultado = {}
    omitidos = []
    for indice, item in enumerate(_registros(payload)):
        try:
            entry = transformar_stock(item)
        except (TypeError, ValueError) as e:
            referencia = resolver_referencia(item) if isinstance(item, dict) else None
            logging.warning(f"Registro {indice} ({referencia}) omitido: {e}")
            omitidos.append({'indice': indice, 'referencia': referencia, 'error': str(e)})
            continue
        resultado[_clave(entry['referencia'])] = entry
    logging.info(f"Stock y precios transformados: {len(resultado)} referencias, {len(omitidos)} omitidas.")
    return resultado, omitidos
