# catalogo/blueprints/produtos.py

from __future__ import annotations
import logging
import re
from pathlib import Path
from flask import Blueprint, current_app, jsonify, request, send_file
from ..helpers.armazenamento_json import RepositorioJson
from ..helpers.exportador import CAMPOS_PRODUTO, gerar_xlsx
from ..helpers.importador import MAPA_PRODUTO, importar_generico
from ..helpers.uploads import salvar_imagem, validar_imagem

logger = logging.getLogger(__name__)

bp = Blueprint("produtos", __name__)

CAMPOS = ["name", "description", "quantity"]
INTEIRO = re.compile(r"-?[0-9]+")

def repo() -> RepositorioJson:
    return current_app.extensions["produtos_repo"]

def diretorio_uploads() -> Path:
    return Path(current_app.config["DIRETORIO_PUBLICO"]) / "uploads"

def texto(mensagem: str, status: int = 200):
    return mensagem, status, {"Content-Type": "text/plain; charset=utf-8"}

def ler_inteiro(valor) -> int | None:
    """Converte texto em inteiro; ``None`` se vazio ou não numérico."""
    if valor is None:
        return None
    valor = str(valor).strip()
    if not INTEIRO.fullmatch(valor):
        return None
    return int(valor)

def corpo():
    """Campos do corpo: JSON quando enviado como JSON, senão o formulário."""
    if request.is_json:
        dados = request.get_json(silent=True)
        return dados if isinstance(dados, dict) else {}
    return request.form

def validar_campos(origem) -> dict | None:
    """Extrai name/description/quantity já limpos, ou ``None`` se algum for inválido."""
    dados = {c: ("" if origem.get(c) is None else str(origem.get(c))).strip() for c in CAMPOS}
    quantidade = ler_inteiro(dados["quantity"])
    if not dados["name"] or not dados["description"] or quantidade is None or quantidade < 0:
        return None
    dados["quantity"] = quantidade
    return dados


@bp.get("", strict_slashes=False)
def listar():
    return jsonify(repo().listar())

@bp.get("/<id>")
def obter(id: str):
    pid = ler_inteiro(id)
    it = repo().obter_por_id(pid) if pid is not None else None
    if not it:
        return texto("Product not found", 404)
    return jsonify(it)

@bp.post("", strict_slashes=False)
def criar():
    imagem = validar_imagem(request.files.get("image"))
    origem = corpo()
    dados = validar_campos(origem)
    if dados is None:
        return texto("Invalid product data", 400)

    if imagem:
        dados["image"] = salvar_imagem(imagem, diretorio_uploads())
    it = repo().criar(dados)
    logger.info("Produto %s criado", it["id"])
    return texto("Product added successfully", 201)

@bp.put("", strict_slashes=False)
def atualizar():
    imagem = validar_imagem(request.files.get("image"))
    origem = corpo()
    pid = ler_inteiro(origem.get("id"))
    dados = validar_campos(origem)
    if pid is None or dados is None:
        return texto("Invalid product data", 400)
    if repo().obter_por_id(pid) is None:
        return texto("Product not found", 404)

    if imagem:
        dados["image"] = salvar_imagem(imagem, diretorio_uploads())
    if not repo().atualizar(pid, dados):
        # removido entre a checagem e a gravação
        return texto("Product not found", 404)
    logger.info("Produto %s atualizado", pid)
    return texto("Product updated successfully")

@bp.delete("/<id>")
def excluir(id: str):
    pid = ler_inteiro(id)
    if pid is not None and repo().excluir(pid):
        logger.info("Produto %s removido", pid)
    return texto("Product deleted")


# --- IMPORTAÇÃO E EXPORTAÇÃO ---

@bp.get("/export")
def exportar():
    buf = gerar_xlsx("Produtos", repo().listar(), CAMPOS_PRODUTO)
    return send_file(buf, as_attachment=True, download_name="products.xlsx",
                     mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")

@bp.post("/import")
def importar():
    arq = request.files.get("file")
    if not arq or not arq.filename:
        return texto("No file sent, expected a CSV or XLSX file", 400)
    try:
        linhas = importar_generico(arq.read(), arq.filename, MAPA_PRODUTO)
    except ValueError as e:
        return texto(str(e), 400)
    except Exception:
        logger.exception("Falha ao ler planilha %s", arq.filename)
        return texto("Import failed: the file could not be read", 400)

    validos = [d for d in (validar_campos(l) for l in linhas) if d is not None]
    if validos:
        repo().criar_varios(validos)
    ignorados = len(linhas) - len(validos)
    logger.info("Importação de %s: %d criados, %d ignorados", arq.filename, len(validos), ignorados)
    return texto(f"{len(validos)} products imported, {ignorados} skipped", 201)
