"""
Configuración de pytest y fixtures compartidas
"""
import pytest

from app import create_app
from data_loader import UpstreamError


class FakeUpstreamClient:
    """Cliente de la API externa que devuelve respuestas fijas o lanza el error indicado."""

    def __init__(self, productos=None, productos_almacenes=None, error=None):
        self._productos = productos
        self._productos_almacenes = productos_almacenes
        self.error = error
        self.llamadas = []

    def _responder(self, ruta, data):
        self.llamadas.append(ruta)
        if self.error:
            raise self.error
        return data

    def productos(self):
        return self._responder('productos', self._productos)

    def productos_almacenes(self):
        return self._responder('productos_almacenes', self._productos_almacenes)


@pytest.fixture
def productos_payload():
    return {
        "datos": [
            {
                "referencia": "REF-002",
                "marca_nombre": "Gloma",
                "categoria_nombre": "Herramientas",
                "grupo": "Manual",
                "subcategoria": "Martillos",
                "nombre": "Martillo de uña",
                "sku": "MU-16",
                "precio": "189.90",
                "gtin": "7501234567890"
            },
            {"referencia": "REF-001", "nombre": "Desarmador"},
            {"nombre": "Sin clave"}
        ]
    }


@pytest.fixture
def stocks_payload():
    return {
        "datos": [
            {
                "referencia": "REF-001",
                "stock": "8",
                "precio": "10.5",
                "precio_oferta": "9.99",
                "almacenes": [
                    {"almacen_clave": "A1", "almacen": "CDMX", "stock": "5"},
                    {"almacen_clave": "A2", "almacen": "Monterrey", "stock": "3"}
                ]
            },
            {
                "referencia": "REF-002",
                "stock": 3,
                "precio": 20,
                "precio_oferta": None,
                "almacenes": [
                    {"almacen_clave": "A1", "almacen": "CDMX", "stock": 3},
                    {"almacen_clave": "A9", "almacen": "  ", "stock": 40}
                ]
            }
        ]
    }


@pytest.fixture
def make_client():
    def _make(**kwargs):
        fake = FakeUpstreamClient(**kwargs)
        app = create_app(upstream_client=fake)
        app.config['TESTING'] = True
        return app.test_client(), fake
    return _make


@pytest.fixture
def upstream_404():
    return UpstreamError(404, "not found")
