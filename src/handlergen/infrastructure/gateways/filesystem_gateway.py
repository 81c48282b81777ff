"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from handlergen.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory), sorted."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            return sorted(str(p) for p in path_obj.glob("**/*.py"))
        return [str(path_obj)] if path_obj.suffix == ".py" else []

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content of a file."""
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        Path(path).write_text(content, encoding=encoding)

    def sibling_path(self, path: str, suffix: str) -> str:
        """Return `<dir>/<stem><suffix>.py` next to `path`."""
        path_obj = Path(path)
        return str(path_obj.with_name(f"{path_obj.stem}{suffix}.py"))

    def module_name(self, path: str) -> str:
        return Path(path).stem

    def is_package_member(self, path: str) -> bool:
        return (Path(path).parent / "__init__.py").is_file()
