"""Pytest configuration and shared fixtures.

Run pytest from this project's root; pythonpath in pyproject.toml puts src/ on
the import path.
"""

import textwrap
from unittest.mock import MagicMock

import pytest

from handlergen.domain.entities import Declaration
from handlergen.infrastructure.gateways.libcst_declaration_gateway import LibCSTDeclarationGateway

EVENT_SOURCE = textwrap.dedent(
    '''\
    """Events."""
    from handlergen.markers import handler


    class Timestamp(int):
        pass


    @handler
    class Event:
        class Start:
            pass

        class Stop:
            at: Timestamp
    '''
)


def read_declaration(source: str) -> Declaration:
    """Return the single @handler declaration in `source`."""
    declarations = LibCSTDeclarationGateway().read_declarations(textwrap.dedent(source))
    assert len(declarations) == 1
    return declarations[0]


def generate_handlers_required_deps(**overrides: object) -> dict[str, object]:
    """Return required dependency mocks for GenerateHandlersUseCase. Pass overrides to customize."""
    config_loader = MagicMock()
    config_loader.output_suffix = "_handlers"
    config_loader.header = True
    base = {
        "filesystem": MagicMock(),
        "reader": MagicMock(),
        "generator": MagicMock(),
        "renderer": MagicMock(),
        "telemetry": MagicMock(),
        "config_loader": config_loader,
    }
    base.update(overrides)
    return base


@pytest.fixture
def event_source() -> str:
    return EVENT_SOURCE


@pytest.fixture
def event_declaration() -> Declaration:
    return read_declaration(EVENT_SOURCE)
