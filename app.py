import logging
from flask import Flask, jsonify, request
from werkzeug.middleware.proxy_fix import ProxyFix

from config import settings
from data_loader import UpstreamClient, UpstreamError
from reshaper import reshape_productos, reshape_stocks_precios, reshape_stocks_precios_aislado


def create_app(upstream_client=None):
    """Crea la aplicación Flask con los dos endpoints proxy del tablero."""
    app = Flask(__name__)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)
    # El orden de las referencias es el de la API externa
    app.json.sort_keys = False

    client = upstream_client or UpstreamClient(settings.API_KEY, settings.UPSTREAM_BASE_URL)

    def error_upstream(e):
        return jsonify({
            "error": "Error al obtener los datos",
            "status": e.status,
            "message": e.message
        }), e.status

    def error_interno(e):
        logging.error(f"Error interno del servidor: {e}")
        return jsonify({
            "error": "Error interno del servidor",
            "message": str(e)
        }), 500

    @app.after_request
    def sin_cache(response):
        if request.path.startswith('/api/'):
            response.headers['Cache-Control'] = 'no-store'
        return response

    @app.route('/api/health')
    def health():
        return jsonify({"status": "healthy"})

    @app.route('/api/productos')
    def productos():
        try:
            resultado = reshape_productos(client.productos())
        except UpstreamError as e:
            return error_upstream(e)
        except Exception as e:
            return error_interno(e)
        return jsonify(resultado)

    @app.route('/api/stocksprecios')
    def stocks_precios():
        aislar = request.args.get('aislar', '').lower() in ('1', 'true', 'si')
        try:
            data = client.productos_almacenes()
            if aislar:
                resultado, omitidos = reshape_stocks_precios_aislado(data)
                return jsonify({"datos": resultado, "omitidos": omitidos})
            resultado = reshape_stocks_precios(data)
        except UpstreamError as e:
            return error_upstream(e)
        except Exception as e:
            return error_interno(e)
        return jsonify(resultado)

    return app


if __name__ == "__main__":
    create_app().run(host=settings.API_HOST, port=settings.API_PORT, debug=settings.API_DEBUG)
