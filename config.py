import os
from dotenv import load_dotenv

# Cargar variables de entorno desde el archivo .env
load_dotenv()

class Settings:
    """
    Clase para centralizar toda la configuración del proyecto.
    Las configuraciones sensibles o específicas del entorno se cargan desde variables de entorno.
    """
    # === DIRECTORIOS ===
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    SALIDA_DIR = os.path.join(BASE_DIR, "salida")
    LOGS_DIR = os.path.join(BASE_DIR, "logs")

    REQUIRED_DIRS = [SALIDA_DIR, LOGS_DIR]

    # === ARCHIVOS DE SALIDA ===
    OUTPUT_TABLERO_EXCEL = os.path.join(SALIDA_DIR, "tablero.xlsx")

    # === API EXTERNA (desde .env) ===
    API_KEY = os.getenv("API_KEY", "")
    UPSTREAM_BASE_URL = os.getenv("UPSTREAM_BASE_URL", "https://apigloma.xentra.com.mx")
    RUTA_PRODUCTOS = "productos"
    RUTA_PRODUCTOS_ALMACENES = "productos_almacenes"

    # === SERVIDOR FLASK (desde .env) ===
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "5000"))
    API_DEBUG = os.getenv("API_DEBUG", "false").lower() in ("1", "true", "yes")

    # === CLIENTE DEL TABLERO ===
    DASHBOARD_URL = os.getenv("DASHBOARD_URL", "http://127.0.0.1:5000")

    # === VISTAS ===
    FILAS_POR_PAGINA = 10
    OPCIONES_FILAS_POR_PAGINA = [10, 20, 50, 100]

    TABLE_STYLES = [
        'Table Style Medium 2', 'Table Style Medium 9', 'Table Style Medium 16'
    ]

    # === PLACEHOLDERS DE PRODUCTOS ===
    DEFAULTS_PRODUCTO = {
        'referencia': 'Sin Referencia',
        'marca': 'Sin Marca',
        'categoria': 'Sin Categoria',
        'grupo': 'Sin Grupo',
        'subcategoria': 'Sin Subcategoria',
        'nombre': 'Sin Nombre',
        'sku': 'Sin SKU',
        'costo': '0.00',
        'gtin': 'Sin Gtin'
    }

    # Campo de salida -> campo del registro de la API externa
    PRODUCTO_COLS_MAP = {
        'marca': 'marca_nombre',
        'categoria': 'categoria_nombre',
        'grupo': 'grupo',
        'subcategoria': 'subcategoria',
        'nombre': 'nombre',
        'sku': 'sku',
        'costo': 'precio',
        'gtin': 'gtin'
    }

settings = Settings()
