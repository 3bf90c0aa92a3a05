# catalogo/helpers/uploads.py

from __future__ import annotations
from pathlib import Path
import os, uuid
from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import HTTPException

# Tipos aceitos e a extensão usada no nome gerado
TIPOS_PERMITIDOS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
TAMANHO_MAXIMO = 2 * 1024 * 1024  # 2 MiB
PREFIXO_URL = "/uploads"


class UploadRejeitado(HTTPException):
    """Arquivo recusado antes de chegar à lógica da rota."""

    def __init__(self, mensagem: str, code: int = 400):
        super().__init__(description=mensagem)
        self.code = code


def _tamanho(arquivo: FileStorage) -> int:
    stream = arquivo.stream
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    tamanho = stream.tell()
    stream.seek(pos)
    return tamanho


def validar_imagem(arquivo: FileStorage | None) -> FileStorage | None:
    """Confere tipo e tamanho da imagem enviada.

    Devolve ``None`` quando nenhum arquivo foi enviado (campo ausente ou vazio).
    Levanta ``UploadRejeitado`` se o tipo não for aceito ou o arquivo passar de 2 MiB.
    """
    if arquivo is None or not arquivo.filename:
        return None
    if arquivo.mimetype not in TIPOS_PERMITIDOS:
        raise UploadRejeitado("Invalid file type", 400)
    if _tamanho(arquivo) > TAMANHO_MAXIMO:
        raise UploadRejeitado("File too large", 413)
    return arquivo


def salvar_imagem(arquivo: FileStorage, diretorio: Path) -> str:
    """Grava a imagem com nome gerado e devolve a referência pública ``/uploads/<nome>``."""
    diretorio.mkdir(parents=True, exist_ok=True)
    nome = uuid.uuid4().hex + TIPOS_PERMITIDOS[arquivo.mimetype]
    arquivo.stream.seek(0)
    arquivo.save(diretorio / nome)
    return f"{PREFIXO_URL}/{nome}"
