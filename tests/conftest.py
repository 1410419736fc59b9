import os
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from configurations.config import Settings


def make_csv(lines, encoding="utf-8"):
    return ("\n".join(lines) + "\n").encode(encoding)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def operadora_csv():
    return make_csv([
        "Nome da operadora:,Cidade,Valor",
        "A,Recife,10",
        "B,Natal,20",
        "A,Olinda,30",
    ])


@pytest.fixture
def latin1_csv():
    return make_csv([
        "Nome do restaurante:,Cidade",
        "Sabor,São Paulo",
        "Açaí Bom,Belém",
        "Sabor,Maceió",
    ], encoding="latin-1")
