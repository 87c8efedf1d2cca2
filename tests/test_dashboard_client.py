import threading
from unittest import mock

import pytest
import requests

from dashboard_client import (
    MENSAJE_ERROR,
    MENSAJE_SIN_DATOS,
    TareaCarga,
    VistaInicio,
    VistaProductos,
    VistaStocksPrecios,
    obtener_json
)
from reshaper import reshape_productos, reshape_stocks_precios


def _cargador(respuestas):
    def cargar(ruta):
        respuesta = respuestas[ruta]
        if isinstance(respuesta, Exception):
            raise respuesta
        return respuesta
    return cargar


def test_tarea_entrega_resultado():
    recibido = []
    tarea = TareaCarga(lambda: 42, recibido.append).iniciar()

    assert tarea.esperar(2)
    assert recibido == [42]


def test_tarea_cancelada_descarta_resultado():
    liberar = threading.Event()
    recibido = []
    fallos = []

    def lenta():
        liberar.wait(2)
        return "tarde"

    tarea = TareaCarga(lenta, recibido.append, fallos.append).iniciar()
    tarea.cancelar()
    liberar.set()

    assert tarea.esperar(2)
    assert tarea.cancelada
    assert recibido == []
    assert fallos == []


def test_tarea_error_llama_al_fallar():
    fallos = []

    def falla():
        raise ValueError("json inválido")

    tarea = TareaCarga(falla, lambda r: None, fallos.append).iniciar()

    assert tarea.esperar(2)
    assert isinstance(fallos[0], ValueError)


def test_vista_productos(productos_payload):
    productos = reshape_productos(productos_payload)
    vista = VistaProductos(_cargador({'/api/productos': productos})).montar()

    assert vista.esperar(2)
    assert vista.error is None
    assert not vista.cargando
    assert len(vista.filas) == 3
    assert vista.paginador.etiqueta() == "Página 1 de 1"
    assert vista.visibles()[0]["costo"] == "$189.90"


def test_vista_error_de_carga():
    vista = VistaStocksPrecios(_cargador({'/api/stocksprecios': requests.ConnectionError("caído")})).montar()

    vista.esperar(2)

    assert vista.error == MENSAJE_ERROR
    assert vista.filas == []


def test_vista_sin_datos():
    vista = VistaStocksPrecios(_cargador({'/api/stocksprecios': {}})).montar()

    vista.esperar(2)

    assert vista.error == MENSAJE_SIN_DATOS


def test_vista_desmontada_no_recibe_datos(productos_payload):
    liberar = threading.Event()
    productos = reshape_productos(productos_payload)

    def cargar(ruta):
        liberar.wait(2)
        return productos

    vista = VistaProductos(cargar).montar()
    tareas = list(vista._tareas)
    vista.desmontar()
    liberar.set()
    assert all(tarea.esperar(2) for tarea in tareas)

    assert not vista.montada
    assert vista.filas == []
    assert vista.error is None


def test_vista_inicio(productos_payload, stocks_payload):
    cargador = _cargador({
        '/api/productos': reshape_productos(productos_payload),
        '/api/stocksprecios': reshape_stocks_precios(stocks_payload)
    })
    vista = VistaInicio(cargador).montar()

    assert vista.esperar(2)
    assert [c["referencia"] for c in vista.costos_visibles()] == ["REF-002", "REF-001", "Sin Referencia"]
    assert vista.existencias_visibles()[0] == {"referencia": "REF-001", "existencia": 8}
    assert vista.almacenes == [
        {"nombre": "CDMX", "stock": 8},
        {"nombre": "Monterrey", "stock": 3}
    ]


@mock.patch("dashboard_client.requests.get")
def test_obtener_json_lanza_en_error_http(mock_get):
    response = mock.Mock()
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    mock_get.return_value = response

    with pytest.raises(requests.HTTPError):
        obtener_json('/api/productos', base_url='http://tablero.local')

    assert mock_get.call_args.args[0] == 'http://tablero.local/api/productos'


def test_vista_desmontar_libera_tareas(productos_payload):
    productos = reshape_productos(productos_payload)
    vista = VistaProductos(_cargador({'/api/productos': productos}))

    for _ in range(3):
        vista.montar()
        vista.esperar(2)
        vista.desmontar()

    assert vista._tareas == []
    assert not vista.cargando
