"""Project settings for the generator. Immutable value object created by Infrastructure."""

import logging

DEFAULT_OUTPUT_SUFFIX = "_handlers"


class ConfigurationLoader:
    """
    Immutable project-wide generator settings.

    Created by Infrastructure from the [tool.handlergen] table. Domain does not
    read the filesystem; Infrastructure calls ConfigFileLoader.load_config_from_fs()
    and constructs ConfigurationLoader(config_dict) at composition root.
    """

    def __init__(self, config_dict: dict[str, object]) -> None:
        """Set config once at construction. No mutable state after init."""
        self._config = config_dict
        if config_dict:
            self.validate_config(config_dict)

    def validate_config(self, config: dict[str, object]) -> None:
        """Warn about values that will be ignored in favour of the defaults."""
        known = {"output_suffix", "header"}
        for key in config:
            if key not in known:
                logging.warning("Configuration Warning: unknown [tool.handlergen] key '%s' ignored.", key)

        suffix = config.get("output_suffix")
        if suffix is not None and not self._is_valid_suffix(suffix):
            logging.warning(
                "Configuration Warning: 'output_suffix' must be a non-empty identifier fragment; "
                "using '%s'.", DEFAULT_OUTPUT_SUFFIX
            )

        header = config.get("header")
        if header is not None and not isinstance(header, bool):
            logging.warning("Configuration Warning: 'header' must be true or false; using true.")

    @staticmethod
    def _is_valid_suffix(suffix: object) -> bool:
        return isinstance(suffix, str) and bool(suffix) and f"m{suffix}".isidentifier()

    @property
    def config(self) -> dict[str, object]:
        """Return the loaded configuration."""
        return self._config

    @property
    def output_suffix(self) -> str:
        """Suffix appended to a source file's stem to name its generated module."""
        suffix = self._config.get("output_suffix")
        if self._is_valid_suffix(suffix):
            return str(suffix)
        return DEFAULT_OUTPUT_SUFFIX

    @property
    def header(self) -> bool:
        """Whether generated modules start with a do-not-edit banner."""
        header = self._config.get("header", True)
        return header if isinstance(header, bool) else True
