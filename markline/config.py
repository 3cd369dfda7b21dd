"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

RENDERER_NAMES = ("html", "text")


@dataclass
class MarklineConfig:
    """Configuration for converting markline documents.

    Attributes:
        embedded_marker: Fence that opens and closes verbatim embedded blocks.
        renderer: Name of the output renderer (``"html"`` or ``"text"``).
        keywords: Whether ``[...]`` and ``{...}`` spans are rendered as keywords.
        max_file_size: Maximum file size in bytes that will be converted.
        max_line_length: Maximum line length allowed in converted files.

    Examples:
        MarklineConfig(embedded_marker="~~~", renderer="text")
    """

    embedded_marker: str = "==="
    renderer: str = "html"
    keywords: bool = False

    # Limits
    max_file_size: int = 10 * 1024 * 1024
    max_line_length: int = 10_000


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`embedded_marker` must not be empty")
    """


def load_config(search_path: Path) -> MarklineConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.markline]`` table from `pyproject.toml` and the ``[markline]``
    or ``[tool.markline]`` table from `.markline.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        MarklineConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("docs"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "markline")]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / ".markline.toml",
            table_paths=[("markline",), ("tool", "markline")],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return MarklineConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> MarklineConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        return _build_config_from_raw(raw_config, config_file, table_path)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> MarklineConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return MarklineConfig()

    try:
        return MarklineConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def validate_config(config: MarklineConfig) -> None:
    """Validate a `MarklineConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the fence marker is empty or not a string, the renderer
            is unknown, `keywords` is not a boolean, or numeric limits are not
            positive integers.

    Examples:
        validate_config(MarklineConfig(renderer="text"))
    """
    if not isinstance(config.embedded_marker, str) or not config.embedded_marker:
        raise ConfigError("`embedded_marker` must not be empty")
    if config.embedded_marker != config.embedded_marker.strip():
        raise ConfigError("`embedded_marker` must not contain surrounding whitespace")
    if config.renderer not in RENDERER_NAMES:
        raise ConfigError(f"`renderer` must be one of: {', '.join(RENDERER_NAMES)}")
    if not isinstance(config.keywords, bool):
        raise ConfigError("`keywords` must be a boolean")

    limits = {
        "max_file_size": config.max_file_size,
        "max_line_length": config.max_line_length,
    }
    _ensure_integers(limits)
    _ensure_positive(limits)


def apply_overrides(config: MarklineConfig, **overrides: object) -> MarklineConfig:
    """Apply override values to a `MarklineConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        MarklineConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `MarklineConfig`.

    Examples:
        updated = apply_overrides(config, renderer="text", embedded_marker=None)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> MarklineConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        MarklineConfig: Validated configuration ready for conversion.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), renderer="text")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return config


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
