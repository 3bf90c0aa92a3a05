from __future__ import annotations
import logging
from pathlib import Path
from flask import Flask
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from .helpers.armazenamento_json import RepositorioJson

logger = logging.getLogger(__name__)

def criar_app(config: dict | None = None) -> Flask:
    config = dict(config or {})

    # Diretórios padrão (dados em JSON e arquivos públicos)
    base = Path(__file__).resolve().parent.parent
    dados_dir = Path(config.setdefault("DIRETORIO_DADOS", str(base / "dados")))
    config.setdefault("ARQUIVO_PRODUTOS", str(dados_dir / "products.json"))
    publico_dir = Path(config.setdefault("DIRETORIO_PUBLICO", str(base / "public")))
    config.setdefault("MAX_CONTENT_LENGTH", 4 * 1024 * 1024)

    dados_dir.mkdir(parents=True, exist_ok=True)
    (publico_dir / "uploads").mkdir(parents=True, exist_ok=True)

    # A pasta pública é servida na raiz: /uploads/<arquivo>
    app = Flask(__name__, static_folder=str(publico_dir), static_url_path="")
    app.config.update(config)

    # Um único repositório por processo, compartilhado pelas rotas
    app.extensions["produtos_repo"] = RepositorioJson(app.config["ARQUIVO_PRODUTOS"])

    from .blueprints import produtos
    app.register_blueprint(produtos.bp, url_prefix="/products")

    @app.errorhandler(RequestEntityTooLarge)
    def _muito_grande(e):
        return "File too large", 413, {"Content-Type": "text/plain; charset=utf-8"}

    @app.errorhandler(HTTPException)
    def _erro_http(e: HTTPException):
        if e.code and e.code >= 500:
            logger.error("Erro %s: %s", e.code, e.description)
        # mantém os cabeçalhos da exceção (ex.: Allow no 405), corpo em texto
        resp = e.get_response()
        resp.set_data(e.description or e.name)
        resp.content_type = "text/plain; charset=utf-8"
        return resp

    return app
