from unittest import mock

import pytest
import requests

from data_loader import InternalError, UpstreamClient, UpstreamError, fetch_upstream


def _respuesta(status=200, data=None, text=""):
    response = mock.Mock()
    response.status_code = status
    response.text = text
    response.json.return_value = data
    return response


@mock.patch("data_loader.requests.get")
def test_fetch_envia_headers_y_devuelve_json(mock_get):
    mock_get.return_value = _respuesta(data={"datos": []})

    data = fetch_upstream("productos", "secreto", base_url="https://api.ejemplo.mx/")

    assert data == {"datos": []}
    args, kwargs = mock_get.call_args
    assert args[0] == "https://api.ejemplo.mx/productos"
    assert kwargs["headers"]["Authorization"] == "secreto"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["headers"]["Cache-Control"] == "no-cache"
    assert "timeout" not in kwargs


@mock.patch("data_loader.requests.get")
def test_fetch_estado_no_exitoso_lanza_upstream_error(mock_get):
    mock_get.return_value = _respuesta(status=404, text="not found")

    with pytest.raises(UpstreamError) as excinfo:
        fetch_upstream("productos", "secreto", base_url="https://api.ejemplo.mx")

    assert excinfo.value.status == 404
    assert excinfo.value.message == "not found"


@mock.patch("data_loader.requests.get")
def test_fetch_error_de_red_lanza_internal_error(mock_get):
    mock_get.side_effect = requests.ConnectionError("conexión rechazada")

    with pytest.raises(InternalError) as excinfo:
        fetch_upstream("productos", "secreto", base_url="https://api.ejemplo.mx")

    assert "conexión rechazada" in excinfo.value.message
    assert mock_get.call_count == 1


@mock.patch("data_loader.requests.get")
def test_fetch_json_invalido_lanza_internal_error(mock_get):
    response = _respuesta()
    response.json.side_effect = ValueError("Expecting value")
    mock_get.return_value = response

    with pytest.raises(InternalError):
        fetch_upstream("productos_almacenes", "secreto", base_url="https://api.ejemplo.mx")


@mock.patch("data_loader.requests.get")
def test_cliente_usa_api_key_inyectada(mock_get):
    mock_get.return_value = _respuesta(data={"datos": []})
    cliente = UpstreamClient("clave-inyectada", base_url="https://api.ejemplo.mx")

    cliente.productos()
    cliente.productos_almacenes()

    urls = [c.args[0] for c in mock_get.call_args_list]
    assert urls == ["https://api.ejemplo.mx/productos", "https://api.ejemplo.mx/productos_almacenes"]
    for llamada in mock_get.call_args_list:
        assert llamada.kwargs["headers"]["Authorization"] == "clave-inyectada"


@pytest.mark.parametrize("status", [300, 304])
@mock.patch("data_loader.requests.get")
def test_fetch_estado_3xx_lanza_upstream_error(mock_get, status):
    response = requests.Response()
    response.status_code = status
    response._content = b"not modified"
    response.encoding = "utf-8"
    mock_get.return_value = response

    with pytest.raises(UpstreamError) as excinfo:
        fetch_upstream("productos", "secreto", base_url="https://api.ejemplo.mx")

    assert excinfo.value.status == status
    assert excinfo.value.message == "not modified"
