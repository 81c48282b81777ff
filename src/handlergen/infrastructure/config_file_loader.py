"""Load [tool.handlergen] from pyproject.toml. Infrastructure I/O only."""

import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib


class ConfigFileLoader:
    """
    Loads config from the nearest pyproject.toml. No top-level functions.
    """

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> dict[str, object]:
        """Walk up from `start` (default: cwd) and return the [tool.handlergen] table, or {}."""
        current_path = (start or Path.cwd()).resolve()
        root_path = Path(current_path.anchor)
        empty: dict[str, object] = {}
        while True:
            config_file = current_path / "pyproject.toml"
            if config_file.exists():
                try:
                    with config_file.open("rb") as f:
                        data = toml_lib.load(f)
                    tool_section = data.get("tool", {}) or {}
                    return tool_section.get("handlergen", {}) or empty
                except OSError:
                    pass
            if current_path == root_path:
                return empty
            current_path = current_path.parent
