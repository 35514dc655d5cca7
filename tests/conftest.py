import pytest

from tagc.template import BuildContext, TemplateBuilder

# Импорт из унифицированной инфраструктуры
from tests.infrastructure.markup import MarkupReader


@pytest.fixture
def reader() -> MarkupReader:
    return MarkupReader()


@pytest.fixture
def builder() -> TemplateBuilder:
    """Построитель со свежим контекстом компиляции."""
    return TemplateBuilder(BuildContext.create())
