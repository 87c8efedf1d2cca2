import math
import logging
from typing import Any, Dict, List, Sequence, Tuple

from config import settings
from schemas import AlmacenTotal
from utils import clave_locale, formatear_mxn, parse_float, parse_int


def listar(mapping: Dict[str, Any]) -> List[Tuple[str, Any]]:
    """Secuencia (referencia, entrada) en el orden de iteración del mapa."""
    return list(mapping.items())


def total_paginas(total: int, filas_por_pagina: int) -> int:
    if filas_por_pagina <= 0:
        raise ValueError(f"filas_por_pagina debe ser positivo: {filas_por_pagina}")
    return math.ceil(total / filas_por_pagina)


def paginar(items: Sequence[Any], pagina: int, filas_por_pagina: int) -> List[Any]:
    """Rebanada [(pagina-1)*filas, pagina*filas). Una página fuera de rango devuelve una lista vacía."""
    if filas_por_pagina <= 0:
        raise ValueError(f"filas_por_pagina debe ser positivo: {filas_por_pagina}")
    if pagina < 1:
        return []
    inicio = (pagina - 1) * filas_por_pagina
    return list(items[inicio:inicio + filas_por_pagina])


class Paginador:
    """Estado de paginación de una tabla, con la navegación acotada como en los botones de la vista."""

    def __init__(self, total: int = 0, filas_por_pagina: int = settings.FILAS_POR_PAGINA):
        self.total = total
        self.filas_por_pagina = filas_por_pagina
        self.pagina = 1

    @property
    def total_paginas(self) -> int:
        return total_paginas(self.total, self.filas_por_pagina)

    @property
    def hay_anterior(self) -> bool:
        return self.pagina > 1

    @property
    def hay_siguiente(self) -> bool:
        return self.pagina < self.total_paginas

    def anterior(self) -> int:
        self.pagina = max(self.pagina - 1, 1)
        return self.pagina

    def siguiente(self) -> int:
        self.pagina = max(min(self.pagina + 1, self.total_paginas), 1)
        return self.pagina

    def ir_a(self, pagina: int) -> int:
        # Sin acotar: una página inexistente simplemente no muestra filas
        self.pagina = pagina
        return self.pagina

    def cambiar_filas(self, filas_por_pagina: int) -> None:
        if filas_por_pagina not in settings.OPCIONES_FILAS_POR_PAGINA:
            raise ValueError(f"Filas por página no permitidas: {filas_por_pagina}")
        self.filas_por_pagina = filas_por_pagina
        self.pagina = 1

    def visibles(self, items: Sequence[Any]) -> List[Any]:
        return paginar(items, self.pagina, self.filas_por_pagina)

    def etiqueta(self) -> str:
        return f"Página {self.pagina} de {self.total_paginas}"


def totales_por_almacen(stock_mapping: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Suma el stock de cada almacén (por nombre, sin espacios en los extremos) a
    través de todos los productos. Los almacenes sin nombre se descartan.
    El resultado se ordena por nombre con comparación de cadenas en español.
    """
    totales: Dict[str, int] = {}
    for item in stock_mapping.values():
        almacenes = (item or {}).get('almacenes') or {}
        for info in almacenes.values():
            nombre = info.get('nombre')
            nombre = str(nombre).strip() if nombre is not None else ''
            if not nombre:
                continue
            # Enteros de Python: el acumulado no se desborda
            totales[nombre] = totales.get(nombre, 0) + parse_int(info.get('stock'))

    ordenados = sorted(totales.items(), key=lambda par: clave_locale(par[0]))
    logging.debug(f"Totales calculados para {len(ordenados)} almacenes.")
    return [
        AlmacenTotal(nombre=nombre, stock=stock).model_dump()
        for nombre, stock in ordenados
    ]


# --- Filas por vista ---

def filas_productos(productos: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Filas de la tabla 'Lista de Productos'."""
    filas = []
    for referencia, item in listar(productos):
        filas.append({
            'referencia': referencia,
            'nombre': item.get('nombre') or 'Sin Nombre',
            'sku': item.get('sku') or 'Sin SKU',
            'costo': formatear_mxn(item.get('costo')),
            'gtin': item.get('gtin') or 'Sin Gtin',
            'marca': item.get('marca') or 'Sin Marca',
            'categoria': item.get('categoria') or 'Sin Categoria',
            'grupo': item.get('grupo') or 'Sin Grupo',
            'subcategoria': item.get('subcategoria') or 'Sin Subcategoria'
        })
    return filas


def filas_stocks_precios(stocks: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Filas de la tabla 'Stock y Precios por Producto'."""
    filas = []
    for referencia, item in listar(stocks):
        filas.append({
            'referencia': referencia,
            'existencia': item.get('existencia') or 0,
            'costo': formatear_mxn(item.get('costo')),
            'oferta': formatear_mxn(item.get('oferta')),
            'almacenes': item.get('almacenes') or {}
        })
    return filas


def opciones_almacenes(almacenes: Dict[str, Any]) -> List[str]:
    return [
        f"Nombre: {info.get('nombre')} | Clave: {clave} | Stock: {info.get('stock')}"
        for clave, info in almacenes.items()
    ]


def serie_costos(productos: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Serie de la gráfica 'Costo de Productos'."""
    return [
        {'referencia': item.get('referencia') or clave, 'costo': parse_float(item.get('costo'))}
        for clave, item in listar(productos)
    ]


def serie_existencias(stocks: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Serie de la gráfica 'Stock por Producto'."""
    return [
        {'referencia': clave, 'existencia': item.get('existencia') or 0}
        for clave, item in listar(stocks)
    ]
