import logging
import threading
import requests
from typing import Any, Callable, Dict, List, Optional

from config import settings
from view_aggregator import (
    Paginador,
    filas_productos,
    filas_stocks_precios,
    serie_costos,
    serie_existencias,
    totales_por_almacen
)

MENSAJE_ERROR = 'Error al obtener los datos.'
MENSAJE_SIN_DATOS = 'No se encontraron datos.'


def obtener_json(ruta: str, base_url: Optional[str] = None) -> Any:
    """Consulta un endpoint del tablero (/api/...) y devuelve el JSON."""
    base_url = base_url or settings.DASHBOARD_URL
    url = f"{base_url.rstrip('/')}/{ruta.lstrip('/')}"
    response = requests.get(url, headers={'Cache-Control': 'no-cache'})
    response.raise_for_status()
    return response.json()


class TareaCarga:
    """
    Ejecuta una carga en un hilo aparte. Una vez cancelada, el resultado se
    descarta y no se invoca ningún callback.
    """

    def __init__(self, funcion: Callable[[], Any], al_terminar: Callable[[Any], None],
                 al_fallar: Optional[Callable[[Exception], None]] = None):
        self.funcion = funcion
        self.al_terminar = al_terminar
        self.al_fallar = al_fallar
        self._cancelada = threading.Event()
        self._lock = threading.Lock()
        self._hilo = threading.Thread(target=self._ejecutar, daemon=True)

    @property
    def cancelada(self) -> bool:
        return self._cancelada.is_set()

    def iniciar(self) -> "TareaCarga":
        self._hilo.start()
        return self

    def cancelar(self) -> None:
        with self._lock:
            self._cancelada.set()

    @property
    def activa(self) -> bool:
        return self._hilo.is_alive()

    def esperar(self, timeout: Optional[float] = None) -> bool:
        self._hilo.join(timeout)
        return not self.activa

    def _ejecutar(self):
        try:
            resultado = self.funcion()
            with self._lock:
                if self.cancelada:
                    logging.debug("Resultado descartado de una carga cancelada.")
                    return
                self.al_terminar(resultado)
        except Exception as e:
            with self._lock:
                if self.cancelada:
                    logging.debug(f"Error descartado de una carga cancelada: {e}")
                    return
                logging.error(f"Error en la carga de datos: {e}")
                if self.al_fallar:
                    self.al_fallar(e)


class Vista:
    """Estado de una vista del tablero ligado a su ciclo de vida (montar/desmontar)."""

    def __init__(self, cargador: Callable[[str], Any] = obtener_json):
        self.cargador = cargador
        self.error: Optional[str] = None
        self.montada = False
        self._tareas: List[TareaCarga] = []

    def _cargar(self, ruta: str, al_terminar: Callable[[Any], None]) -> TareaCarga:
        tarea = TareaCarga(lambda: self.cargador(ruta), al_terminar, self._fallar)
        self._tareas.append(tarea)
        return tarea.iniciar()

    def _fallar(self, e: Exception):
        self.error = MENSAJE_ERROR

    def montar(self) -> "Vista":
        self.montada = True
        return self

    def desmontar(self) -> None:
        self.montada = False
        for tarea in self._tareas:
            tarea.cancelar()
        self._tareas.clear()

    def esperar(self, timeout: Optional[float] = None) -> bool:
        return all(tarea.esperar(timeout) for tarea in self._tareas)

    @property
    def cargando(self) -> bool:
        return any(tarea.activa for tarea in self._tareas)


class VistaTabla(Vista):
    ruta = ''

    def __init__(self, cargador: Callable[[str], Any] = obtener_json):
        super().__init__(cargador)
        self.data: Dict[str, Any] = {}
        self.filas: List[Dict[str, Any]] = []
        self.paginador = Paginador()

    def construir_filas(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def montar(self) -> "VistaTabla":
        super().montar()
        self._cargar(self.ruta, self._recibir)
        return self

    def _recibir(self, data: Any):
        if not data:
            self.error = MENSAJE_SIN_DATOS
            return
        self.data = data
        self.filas = self.construir_filas(data)
        self.paginador.total = len(self.filas)

    def visibles(self) -> List[Dict[str, Any]]:
        return self.paginador.visibles(self.filas)


class VistaProductos(VistaTabla):
    titulo = 'Lista de Productos'
    ruta = '/api/productos'

    def construir_filas(self, data):
        return filas_productos(data)


class VistaStocksPrecios(VistaTabla):
    titulo = 'Stock y Precios por Producto'
    ruta = '/api/stocksprecios'

    def construir_filas(self, data):
        return filas_stocks_precios(data)


class VistaInicio(Vista):
    """Dashboard: costo por producto, stock por producto y stock total por almacén."""
    titulo = 'Dashboard'

    def __init__(self, cargador: Callable[[str], Any] = obtener_json):
        super().__init__(cargador)
        self.costos: List[Dict[str, Any]] = []
        self.existencias: List[Dict[str, Any]] = []
        self.almacenes: List[Dict[str, Any]] = []
        self.paginador_costos = Paginador()
        self.paginador_existencias = Paginador()

    def montar(self) -> "VistaInicio":
        super().montar()
        self._cargar('/api/productos', self._recibir_productos)
        self._cargar('/api/stocksprecios', self._recibir_stocks)
        return self

    def _recibir_productos(self, data: Any):
        self.costos = serie_costos(data or {})
        self.paginador_costos.total = len(self.costos)

    def _recibir_stocks(self, data: Any):
        data = data or {}
        self.existencias = serie_existencias(data)
        self.paginador_existencias.total = len(self.existencias)
        self.almacenes = totales_por_almacen(data)

    def costos_visibles(self) -> List[Dict[str, Any]]:
        return self.paginador_costos.visibles(self.costos)

    def existencias_visibles(self) -> List[Dict[str, Any]]:
        return self.paginador_existencias.visibles(self.existencias)
