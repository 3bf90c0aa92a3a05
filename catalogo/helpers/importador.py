from __future__ import annotations
import csv
import io
import unicodedata
from openpyxl import load_workbook
from thefuzz import process

# Campo do produto -> apelidos aceitos no cabeçalho da planilha
MAPA_PRODUTO = {
    "name": ["nome", "produto", "product", "item"],
    "description": ["descricao", "descrição", "detalhes", "details"],
    "quantity": ["quantidade", "qtd", "qty", "estoque", "stock"],
}

PONTUACAO_MINIMA = 80


def _normalizar(s: str) -> str:
    """Minúsculas, sem espaços nas pontas e sem acentos."""
    s = (s or "").strip().lower()
    return "".join(ch for ch in unicodedata.normalize("NFKD", s) if not unicodedata.combining(ch))


def _ler_csv(bytes_data: bytes) -> tuple[list[str], list[list[str]]]:
    data = bytes_data.decode("utf-8-sig", errors="ignore")
    linhas = data.splitlines()
    if not linhas:
        return [], []
    try:
        dialect = csv.Sniffer().sniff(linhas[0], delimiters=",;")
    except csv.Error:
        dialect = "excel"
    todas = list(csv.reader(io.StringIO(data), dialect))
    return todas[0], todas[1:]


def _ler_xlsx(bytes_data: bytes) -> tuple[list[str], list[list[str]]]:
    ws = load_workbook(io.BytesIO(bytes_data), read_only=True, data_only=True).active
    linhas = ws.iter_rows(values_only=True)
    cabecalho = [str(c or "") for c in next(linhas, ())]
    corpo = [["" if c is None else str(c) for c in row] for row in linhas]
    return cabecalho, corpo


def _ler_planilha(bytes_data: bytes, filename: str) -> tuple[list[str], list[dict]]:
    """Lê CSV ou XLSX e devolve o cabeçalho e as linhas como dicionários (chave = cabeçalho original)."""
    ext = (filename or "").rsplit(".", 1)[-1].lower()
    if ext in ("csv", "txt"):
        cabecalho, corpo = _ler_csv(bytes_data)
    elif ext in ("xlsx", "xlsm"):
        cabecalho, corpo = _ler_xlsx(bytes_data)
    else:
        raise ValueError(f"Unsupported file format: .{ext}")

    linhas = []
    for row in corpo:
        if all(not (cell or "").strip() for cell in row): continue
        linhas.append({cabecalho[i]: (row[i] if i < len(row) else "") for i in range(len(cabecalho))})
    return cabecalho, linhas


def _mapear_cabecalhos(cabecalhos: list[str], mapa: dict[str, list[str]]) -> dict[str, str]:
    """Liga cada cabeçalho da planilha ao campo do produto mais parecido."""
    opcoes = {}
    for campo, apelidos in mapa.items():
        opcoes[_normalizar(campo)] = campo
        for apelido in apelidos:
            opcoes[_normalizar(apelido)] = campo

    resultado = {}
    for cabecalho in cabecalhos:
        achado = process.extractOne(_normalizar(cabecalho), list(opcoes), score_cutoff=PONTUACAO_MINIMA)
        if achado:
            resultado[cabecalho] = opcoes[achado[0]]
    return resultado


def importar_generico(bytes_data: bytes, filename: str, mapa: dict[str, list[str]] = MAPA_PRODUTO) -> list[dict]:
    """Converte as linhas da planilha em registros com os campos de ``mapa`` (valores em texto)."""
    cabecalhos, linhas = _ler_planilha(bytes_data, filename)
    if not linhas:
        return []

    correspondencia = _mapear_cabecalhos(cabecalhos, mapa)
    saida = []
    for linha in linhas:
        registro = {campo: "" for campo in mapa}
        for original, valor in linha.items():
            if original in correspondencia:
                registro[correspondencia[original]] = (valor or "").strip()
        saida.append(registro)
    return saida
