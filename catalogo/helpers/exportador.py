from __future__ import annotations
from io import BytesIO
from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

# (rótulo da coluna, campo do produto)
CAMPOS_PRODUTO = [
    ("ID", "id"), ("NOME", "name"), ("DESCRIÇÃO", "description"),
    ("QUANTIDADE", "quantity"), ("IMAGEM", "image"),
]

def gerar_xlsx(titulo: str, registros: list[dict], campos: list[tuple[str, str]]) -> BytesIO:
    """Gera um XLSX em memória: uma linha de cabeçalho e uma linha por registro."""
    wb = Workbook(); ws = wb.active; ws.title = (titulo or "Planilha")[:31]
    larguras = [len(rotulo) for rotulo, _ in campos]

    for j, (rotulo, _) in enumerate(campos, start=1):
        ws.cell(row=1, column=j, value=rotulo).font = Font(bold=True)

    for i, r in enumerate(registros, start=2):
        for j, (_, key) in enumerate(campos, start=1):
            valor = r.get(key)
            # números continuam números na planilha; ausente vira célula vazia
            if valor is not None and not isinstance(valor, (int, float)):
                valor = str(valor)
            ws.cell(row=i, column=j, value=valor)
            larguras[j - 1] = max(larguras[j - 1], len(str(valor or "")))

    for j, largura in enumerate(larguras, start=1):
        ws.column_dimensions[get_column_letter(j)].width = min(60, max(12, largura + 2))
    ws.freeze_panes = "A2"

    buf = BytesIO(); wb.save(buf); buf.seek(0)
    return buf
