"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from handlergen.infrastructure.di.container import HandlerGenContainer
from handlergen.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = HandlerGenContainer()

    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        reader=container.get_declaration_reader(),
        generator=container.get_handler_generator(),
        renderer=container.get_module_renderer(),
    )

    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
