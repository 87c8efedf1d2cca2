import os
import logging
import pandas as pd
from typing import Any, Dict, List

from config import settings
from view_aggregator import opciones_almacenes

SIN_PRODUCTOS = "No hay productos para mostrar."

COLUMNAS_PRODUCTOS = {
    'referencia': 'Referencia', 'nombre': 'Nombre', 'sku': 'SKU', 'costo': 'Costo',
    'gtin': 'GTIN', 'marca': 'Marca', 'categoria': 'Categoría', 'grupo': 'Grupo',
    'subcategoria': 'Subcategoría'
}

COLUMNAS_STOCKS = {
    'referencia': 'Referencia', 'existencia': 'Existencia Total', 'costo': 'Costo',
    'oferta': 'Oferta', 'almacenes': 'Almacenes'
}


def tabla_productos(filas: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(filas, columns=list(COLUMNAS_PRODUCTOS))
    return df.rename(columns=COLUMNAS_PRODUCTOS)


def tabla_stocks_precios(filas: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(filas, columns=list(COLUMNAS_STOCKS))
    df['almacenes'] = df['almacenes'].apply(lambda almacenes: '; '.join(opciones_almacenes(almacenes or {})))
    return df.rename(columns=COLUMNAS_STOCKS)


def tabla_serie(serie: List[Dict[str, Any]], etiqueta: str, valor: str) -> pd.DataFrame:
    """Tabla de dos columnas para las series del dashboard (barras horizontales)."""
    df = pd.DataFrame(serie, columns=[etiqueta, valor])
    return df.rename(columns={etiqueta: etiqueta.capitalize(), valor: valor.capitalize()})


def render_texto(df: pd.DataFrame, titulo: str, pie: str = '') -> str:
    """Renderiza una tabla de la vista como texto para la terminal."""
    lineas = [titulo, '=' * len(titulo)]
    lineas.append(SIN_PRODUCTOS if df.empty else df.to_string(index=False))
    if pie:
        lineas.append(pie)
    return '\n'.join(lineas)


def _escribir_tabla(writer, df: pd.DataFrame, sheet_name: str, style_index: int):
    df.to_excel(writer, sheet_name=sheet_name, index=False, startrow=1, header=False)
    worksheet = writer.sheets[sheet_name]

    column_settings = []
    for header_name in df.columns:
        width = max(df[header_name].astype(str).map(len).max() if not df.empty else 0, len(header_name)) + 2
        if header_name in ('Nombre', 'Almacenes'):
            width = 50
        column_settings.append({'header': header_name})
        col_idx = df.columns.get_loc(header_name)
        worksheet.set_column(col_idx, col_idx, width)

    (max_row, max_col) = df.shape
    worksheet.add_table(0, 0, max(max_row, 1), max_col - 1, {
        'columns': column_settings,
        'style': settings.TABLE_STYLES[style_index % len(settings.TABLE_STYLES)],
        'name': f"Tabla_{sheet_name.replace(' ', '_')}"
    })


def generate_tablero_excel(filas_productos: List[Dict[str, Any]], filas_stocks: List[Dict[str, Any]],
                           almacenes: List[Dict[str, Any]], output_path: str = settings.OUTPUT_TABLERO_EXCEL) -> str:
    """Exporta las tres vistas del tablero a un libro de Excel con formato de tabla."""
    logging.info("Generando libro de Excel del tablero...")
    os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
    hojas = [
        ('Productos', tabla_productos(filas_productos)),
        ('Stock y Precios', tabla_stocks_precios(filas_stocks)),
        ('Almacenes', tabla_serie(almacenes, 'nombre', 'stock'))
    ]
    with pd.ExcelWriter(output_path, engine='xlsxwriter') as writer:
        for style_index, (sheet_name, df) in enumerate(hojas):
            _escribir_tabla(writer, df, sheet_name, style_index)
            logging.info(f"Hoja '{sheet_name}' escrita con {len(df)} filas.")
    logging.info(f"Tablero exportado en {output_path}")
    return output_path
