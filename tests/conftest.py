from __future__ import annotations

import pytest

from catalogo import criar_app


@pytest.fixture
def app(tmp_path):
    """Aplicação apontando para diretórios temporários."""
    app = criar_app({
        "TESTING": True,
        "DIRETORIO_DADOS": str(tmp_path / "dados"),
        "DIRETORIO_PUBLICO": str(tmp_path / "public"),
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def repo(app):
    return app.extensions["produtos_repo"]


@pytest.fixture
def uploads_dir(tmp_path):
    return tmp_path / "public" / "uploads"
