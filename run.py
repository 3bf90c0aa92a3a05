# run.py

import logging
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Adiciona o diretório raiz do projeto ao caminho do Python
project_root = Path(__file__).resolve().parent
sys.path.insert(0, str(project_root))

from catalogo import criar_app

load_dotenv()
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = criar_app()

if __name__ == '__main__':
    port = int(os.getenv("PORT", "3000"))
    logging.getLogger(__name__).info("Server is running at http://localhost:%s", port)
    app.run(port=port)
