from pydantic import BaseModel
from typing import Any, Dict

# Los campos de texto se copian tal como llegan de la API externa, sin coerción

class ProductoEntry(BaseModel):
    """Define la estructura de un producto en la respuesta de /api/productos."""
    marca: Any
    categoria: Any
    grupo: Any
    subcategoria: Any
    referencia: Any
    nombre: Any
    sku: Any
    costo: Any
    gtin: Any

class AlmacenStock(BaseModel):
    """Define la estructura del stock para un único almacén."""
    nombre: Any = None
    stock: int

class StockEntry(BaseModel):
    """Define el esquema completo para un producto en /api/stocksprecios."""
    referencia: Any
    existencia: int
    costo: float
    oferta: float
    almacenes: Dict[str, AlmacenStock]

class AlmacenTotal(BaseModel):
    """Stock sumado de un almacén a través de todos los productos."""
    nombre: str
    stock: int
