import logging
import requests
from typing import Any, Optional

from config import settings


class DashboardError(Exception):
    """Error base del tablero."""


class UpstreamError(DashboardError):
    """La API externa respondió con un estado distinto de 2xx."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class InternalError(DashboardError):
    """Fallo de red o de parseo al consultar la API externa."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def fetch_upstream(path: str, api_key: str, base_url: Optional[str] = None) -> Any:
    """
    Descarga un recurso de la API externa y devuelve el JSON sin transformar.
    Cada llamada va a la API en vivo: no hay caché, reintentos ni timeout propio.
    """
    base_url = base_url or settings.UPSTREAM_BASE_URL
    url = f"{base_url.rstrip('/')}/{path.lstrip('/')}"
    headers = {
        'Authorization': api_key,
        'Content-Type': 'application/json',
        'Cache-Control': 'no-cache',
        'Pragma': 'no-cache'
    }
    logging.info(f"Consultando API externa: {url}")
    try:
        response = requests.get(url, headers=headers)
    except requests.RequestException as e:
        logging.error(f"Error de red consultando {url}: {e}")
        raise InternalError(str(e)) from e

    if not 200 <= response.status_code < 300:
        logging.error(f"La API externa respondió {response.status_code} para {url}")
        raise UpstreamError(response.status_code, response.text)

    try:
        data = response.json()
    except ValueError as e:
        logging.error(f"Respuesta no es JSON válido en {url}: {e}")
        raise InternalError(str(e)) from e

    logging.info(f"Respuesta recibida de {url}")
    return data


class UpstreamClient:
    """Cliente de la API de productos con la API key inyectada en la construcción."""

    def __init__(self, api_key: str, base_url: Optional[str] = None):
        self.api_key = api_key
        self.base_url = base_url or settings.UPSTREAM_BASE_URL

    def fetch(self, path: str) -> Any:
        return fetch_upstream(path, self.api_key, base_url=self.base_url)

    def productos(self) -> Any:
        return self.fetch(settings.RUTA_PRODUCTOS)

    def productos_almacenes(self) -> Any:
        return self.fetch(settings.RUTA_PRODUCTOS_ALMACENES)
