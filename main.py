import os
import sys
import logging
import argparse
from datetime import datetime
from functools import partial

from config import settings
from dashboard_client import VistaInicio, VistaProductos, VistaStocksPrecios, obtener_json
from report_generator import (
    generate_tablero_excel,
    render_texto,
    tabla_productos,
    tabla_serie,
    tabla_stocks_precios
)
from view_aggregator import totales_por_almacen

# Crear directorios requeridos si no existen
for directory in settings.REQUIRED_DIRS:
    os.makedirs(directory, exist_ok=True)

def setup_logging():
    """Configura el sistema de logging para el script."""
    log_filename = f"tablero_{datetime.now().strftime('%Y%m%d')}.log"
    log_filepath = os.path.join(settings.LOGS_DIR, log_filename)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
        handlers=[
            logging.FileHandler(log_filepath, encoding='utf-8'),
            logging.StreamHandler(sys.stderr)
        ],
    )
    return logging.getLogger(__name__)

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tablero de productos, stock y precios.")
    parser.add_argument('vista', choices=['inicio', 'productos', 'stocksprecios', 'exportar'])
    parser.add_argument('--pagina', type=int, default=1)
    parser.add_argument('--filas', type=int, default=settings.FILAS_POR_PAGINA,
                        choices=settings.OPCIONES_FILAS_POR_PAGINA)
    parser.add_argument('--url', default=settings.DASHBOARD_URL, help="URL base del servidor del tablero")
    parser.add_argument('--salida', default=settings.OUTPUT_TABLERO_EXCEL, help="Ruta del Excel a exportar")
    return parser.parse_args(argv)

def _cargar(vista):
    vista.montar()
    vista.esperar()
    vista.desmontar()
    return vista

def mostrar_tabla(vista, args):
    _cargar(vista)
    if vista.error:
        return f"Error: {vista.error}"
    vista.paginador.cambiar_filas(args.filas)
    vista.paginador.ir_a(args.pagina)
    if isinstance(vista, VistaProductos):
        df = tabla_productos(vista.visibles())
    else:
        df = tabla_stocks_precios(vista.visibles())
    return render_texto(df, vista.titulo, vista.paginador.etiqueta())

def mostrar_inicio(vista, args):
    _cargar(vista)
    if vista.error:
        return f"Error: {vista.error}"
    vista.paginador_costos.ir_a(args.pagina)
    vista.paginador_existencias.ir_a(args.pagina)
    secciones = [
        render_texto(tabla_serie(vista.costos_visibles(), 'referencia', 'costo'),
                     'Costo de Productos', vista.paginador_costos.etiqueta()),
        render_texto(tabla_serie(vista.existencias_visibles(), 'referencia', 'existencia'),
                     'Stock por Producto', vista.paginador_existencias.etiqueta()),
        render_texto(tabla_serie(vista.almacenes, 'nombre', 'stock'), 'Stock Total por Almacén')
    ]
    return '\n\n'.join(secciones)

def exportar(cargador, args):
    productos = _cargar(VistaProductos(cargador))
    stocks = _cargar(VistaStocksPrecios(cargador))
    for vista in (productos, stocks):
        if vista.error:
            return f"Error: {vista.error}"
    ruta = generate_tablero_excel(productos.filas, stocks.filas, totales_por_almacen(stocks.data), args.salida)
    return f"Tablero exportado en {ruta}"


# --- FLUJO PRINCIPAL DE EJECUCIÓN ---
def main(argv=None):
    """Muestra una de las vistas del tablero en la terminal o la exporta a Excel."""
    logger = setup_logging()
    args = parse_args(argv)
    logger.info(f"=== VISTA '{args.vista}' desde {args.url} ===")
    cargador = partial(obtener_json, base_url=args.url)

    if args.vista == 'productos':
        salida = mostrar_tabla(VistaProductos(cargador), args)
    elif args.vista == 'stocksprecios':
        salida = mostrar_tabla(VistaStocksPrecios(cargador), args)
    elif args.vista == 'inicio':
        salida = mostrar_inicio(VistaInicio(cargador), args)
    else:
        salida = exportar(cargador, args)

    print(salida)
    return 1 if salida.startswith("Error:") else 0

if __name__ == "__main__":
    sys.exit(main())
