"""Testes do repositório JSON (leitura tolerante, gravação completa, ids)."""

from __future__ import annotations

import json
import logging
import threading

import pytest

from catalogo.helpers.armazenamento_json import RepositorioJson


@pytest.fixture
def caminho(tmp_path):
    return tmp_path / "products.json"


@pytest.fixture
def repositorio(caminho):
    return RepositorioJson(caminho)


class TestCarregar:

    def test_arquivo_inexistente_devolve_lista_vazia(self, repositorio, caminho):
        assert repositorio.carregar() == []
        assert not caminho.exists()

    def test_json_invalido_devolve_lista_vazia_e_loga(self, repositorio, caminho, caplog):
        caminho.write_text("{ isso não é json", encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            assert repositorio.carregar() == []
        assert "Erro ao carregar produtos" in caplog.text

    def test_documento_que_nao_e_lista(self, repositorio, caminho, caplog):
        caminho.write_text('{"id": 1}', encoding="utf-8")
        with caplog.at_level(logging.ERROR):
            assert repositorio.carregar() == []
        assert "não contém uma lista" in caplog.text

    def test_arquivo_vazio(self, repositorio, caminho):
        caminho.write_text("", encoding="utf-8")
        assert repositorio.carregar() == []

    def test_ignora_registros_que_nao_sao_objetos(self, repositorio, caminho):
        caminho.write_text('[{"id": 1, "name": "a"}, 3, "x"]', encoding="utf-8")
        assert repositorio.carregar() == [{"id": 1, "name": "a"}]


class TestSalvar:

    def test_ordem_dos_campos_e_indentacao(self, repositorio, caminho):
        repositorio.salvar([{"quantity": 2, "image": "/uploads/a.png", "name": "A", "id": 7, "description": "d"}])
        texto = caminho.read_text(encoding="utf-8")
        assert texto.startswith("[\n  {\n")
        assert list(json.loads(texto)[0]) == ["id", "name", "description", "quantity", "image"]

    def test_salvar_carregar_preserva_conteudo(self, repositorio, caminho):
        original = [
            {"id": 1, "name": "Caneta", "description": "Azul", "quantity": 10},
            {"id": 2, "name": "Lápis", "description": "HB", "quantity": 0, "image": "/uploads/x.png"},
        ]
        caminho.write_text(json.dumps(original), encoding="utf-8")
        repositorio.salvar(repositorio.carregar())
        assert json.loads(caminho.read_text(encoding="utf-8")) == original

    def test_nao_deixa_arquivo_temporario(self, repositorio, caminho):
        repositorio.salvar([])
        assert [p.name for p in caminho.parent.iterdir()] == ["products.json"]

    def test_falha_de_gravacao_e_logada(self, tmp_path, caplog):
        # o destino é um diretório: a troca do arquivo falha
        destino = tmp_path / "ocupado"
        destino.mkdir()
        repositorio = RepositorioJson(destino)
        with caplog.at_level(logging.ERROR):
            repositorio.salvar([{"id": 1}])
        assert "Erro ao salvar produtos" in caplog.text


class TestOperacoes:

    def test_criar_acrescenta_no_fim(self, repositorio):
        a = repositorio.criar({"name": "A", "description": "a", "quantity": 1})
        b = repositorio.criar({"name": "B", "description": "b", "quantity": 2})
        assert [p["id"] for p in repositorio.listar()] == [a["id"], b["id"]]

    def test_criacoes_seguidas_tem_ids_distintos(self, repositorio):
        # várias criações no mesmo milissegundo não podem repetir id
        ids = [p["id"] for p in repositorio.criar_varios(
            [{"name": f"p{i}", "description": "d", "quantity": i} for i in range(50)])]
        ids += [repositorio.criar({"name": "x", "description": "d", "quantity": 0})["id"] for _ in range(20)]
        assert len(set(ids)) == len(ids)
        assert ids == sorted(ids)

    def test_id_novo_fica_acima_do_maior_existente(self, repositorio):
        futuro = 10 ** 15
        repositorio.salvar([{"id": futuro, "name": "A", "description": "a", "quantity": 1}])
        assert repositorio.criar({"name": "B", "description": "b", "quantity": 1})["id"] == futuro + 1

    def test_atualizar_mantem_imagem_anterior(self, repositorio):
        repositorio.salvar([{"id": 1, "name": "A", "description": "a", "quantity": 1, "image": "/uploads/a.png"}])
        assert repositorio.atualizar(1, {"name": "B", "description": "b", "quantity": 3})
        assert repositorio.obter_por_id(1) == {
            "id": 1, "name": "B", "description": "b", "quantity": 3, "image": "/uploads/a.png"}

    def test_atualizar_sem_imagem_anterior(self, repositorio):
        repositorio.salvar([{"id": 1, "name": "A", "description": "a", "quantity": 1}])
        repositorio.atualizar(1, {"name": "B", "description": "b", "quantity": 3})
        assert "image" not in repositorio.obter_por_id(1)

    def test_atualizar_id_inexistente_nao_grava(self, repositorio, caminho):
        repositorio.salvar([{"id": 1, "name": "A", "description": "a", "quantity": 1}])
        antes = caminho.read_text(encoding="utf-8")
        assert repositorio.atualizar(2, {"name": "B", "description": "b", "quantity": 3}) is False
        assert caminho.read_text(encoding="utf-8") == antes

    def test_excluir_remove_todas_as_ocorrencias(self, repositorio):
        repositorio.salvar([
            {"id": 1, "name": "A", "description": "a", "quantity": 1},
            {"id": 2, "name": "B", "description": "b", "quantity": 1},
            {"id": 1, "name": "C", "description": "c", "quantity": 1},
        ])
        assert repositorio.excluir(1) is True
        assert [p["name"] for p in repositorio.listar()] == ["B"]

    def test_excluir_duas_vezes_equivale_a_uma(self, repositorio):
        repositorio.salvar([
            {"id": 1, "name": "A", "description": "a", "quantity": 1},
            {"id": 2, "name": "B", "description": "b", "quantity": 1},
        ])
        repositorio.excluir(1)
        depois_de_uma = repositorio.listar()
        assert repositorio.excluir(1) is False
        assert repositorio.listar() == depois_de_uma

    def test_criacoes_concorrentes_nao_perdem_registros(self, repositorio):
        total = 30
        inicio = threading.Barrier(total)
        erros = []

        def trabalhador(n):
            try:
                inicio.wait()
                repositorio.criar({"name": f"p{n}", "description": "d", "quantity": n})
            except Exception as e:  # pragma: no cover
                erros.append(e)

        threads = [threading.Thread(target=trabalhador, args=(n,)) for n in range(total)]
        for t in threads: t.start()
        for t in threads: t.join()

        assert erros == []
        produtos = repositorio.listar()
        assert len(produtos) == total
        assert len({p["id"] for p in produtos}) == total
        assert sorted(p["quantity"] for p in produtos) == list(range(total))
