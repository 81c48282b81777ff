from typing import TYPE_CHECKING, Any, Optional, cast

from handlergen.domain.config import ConfigurationLoader
from handlergen.infrastructure.config_file_loader import ConfigFileLoader
from handlergen.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from handlergen.infrastructure.gateways.handler_generator import HandlerGenerationGateway
from handlergen.infrastructure.gateways.libcst_declaration_gateway import LibCSTDeclarationGateway
from handlergen.infrastructure.gateways.libcst_module_renderer import LibCSTModuleRenderer
from handlergen.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from handlergen.domain.protocols import (
        DeclarationReaderProtocol,
        FileSystemProtocol,
        HandlerGeneratorProtocol,
        ModuleRendererProtocol,
        TelemetryPort,
    )


class HandlerGenContainer:
    """Dependency Injection Container for handlergen."""

    def __init__(self, config_dict: Optional[dict[str, object]] = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_dict)

    def _register_defaults(self, config_dict: Optional[dict[str, object]]) -> None:
        """Register default implementations for protocols."""
        if config_dict is None:
            config_dict = ConfigFileLoader.load_config_from_fs()
        self.register_singleton("ConfigurationLoader", ConfigurationLoader(config_dict))
        self.register_singleton(
            "TelemetryPort", ProjectTelemetry("HANDLERGEN", "cyan", "Handler generator ready"))
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("DeclarationReader", LibCSTDeclarationGateway())
        self.register_singleton("HandlerGenerator", HandlerGenerationGateway())
        self.register_singleton("ModuleRenderer", LibCSTModuleRenderer())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        """Return the filesystem gateway."""
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_declaration_reader(self) -> "DeclarationReaderProtocol":
        return cast("DeclarationReaderProtocol", self.get("DeclarationReader"))

    def get_handler_generator(self) -> "HandlerGeneratorProtocol":
        return cast("HandlerGeneratorProtocol", self.get("HandlerGenerator"))

    def get_module_renderer(self) -> "ModuleRendererProtocol":
        return cast("ModuleRendererProtocol", self.get("ModuleRenderer"))
