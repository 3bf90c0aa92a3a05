from __future__ import annotations
from pathlib import Path
import copy, json, logging, os, threading, time

logger = logging.getLogger(__name__)

# Ordem fixa dos campos no documento
ORDEM_CAMPOS = ("id", "name", "description", "quantity", "image")


def _ordenar(item: dict) -> dict:
    novo = {c: item[c] for c in ORDEM_CAMPOS if c in item}
    novo.update((k, v) for k, v in item.items() if k not in novo)
    return novo


class RepositorioJson:
    """Coleção de produtos guardada em um único documento JSON (lista de objetos).

    Toda operação relê o arquivo inteiro e, quando altera algo, regrava o arquivo
    inteiro. Leitura e escrita nunca levantam exceção para quem chama: falhas são
    registradas no log e a leitura devolve uma lista vazia.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._trava = threading.Lock()

    # --- leitura / gravação ---

    def carregar(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            dados = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError):
            logger.exception("Erro ao carregar produtos de %s", self.path)
            return []
        if not isinstance(dados, list):
            logger.error("Documento %s não contém uma lista de produtos", self.path)
            return []
        lista = [it for it in dados if isinstance(it, dict)]
        if len(lista) != len(dados):
            logger.warning("%d registro(s) inválido(s) ignorado(s) em %s", len(dados) - len(lista), self.path)
        return lista

    def salvar(self, produtos: list[dict]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            texto = json.dumps([_ordenar(p) for p in produtos], ensure_ascii=False, indent=2)
            tmp.write_text(texto, encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError):
            logger.exception("Erro ao salvar produtos em %s", self.path)

    # --- operações ---

    def listar(self) -> list[dict]:
        return self.carregar()

    def obter_por_id(self, id: int) -> dict | None:
        for it in self.carregar():
            if it.get("id") == id: return it
        return None

    def criar(self, dados: dict) -> dict:
        return self.criar_varios([dados])[0]

    def criar_varios(self, registros: list[dict]) -> list[dict]:
        with self._trava:
            lista = self.carregar()
            criados = []
            for dados in registros:
                item = copy.deepcopy(dados)
                item["id"] = self._proximo_id(lista)
                item = _ordenar(item)
                lista.append(item)
                criados.append(item)
            self.salvar(lista)
        return criados

    def atualizar(self, id: int, dados: dict) -> bool:
        """Substitui o primeiro registro com este id.

        Se ``dados`` não traz ``image``, a imagem anterior é mantida (ou a ausência dela).
        """
        with self._trava:
            lista = self.carregar()
            for i, it in enumerate(lista):
                if it.get("id") == id:
                    novo = copy.deepcopy(dados)
                    novo["id"] = id
                    if "image" not in novo and "image" in it:
                        novo["image"] = it["image"]
                    lista[i] = _ordenar(novo)
                    self.salvar(lista)
                    return True
        return False

    def excluir(self, id: int) -> bool:
        with self._trava:
            lista = self.carregar(); size = len(lista)
            lista = [it for it in lista if it.get("id") != id]
            self.salvar(lista)
        return len(lista) != size

    @staticmethod
    def _proximo_id(lista: list[dict]) -> int:
        # milissegundos do relógio, mas sempre acima do maior id já gravado
        agora = int(time.time() * 1000)
        maior = max((it["id"] for it in lista if isinstance(it.get("id"), int)), default=0)
        return agora if agora > maior else maior + 1
