"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_SIGNATURE


@dataclass
class FormatterConfig:
    """Configuration for formatting reply wikitext.

    Attributes:
        paragraph_templates: Templates marking paragraph boundaries; only the
            first one is used. Empty to use ``<br>`` or re-indentation instead.
        space_after_indentation: Whether a space separates the indentation
            marker from text that does not start with a list prefix.
        file_namespaces: Namespace names recognized in inline file embeds
            (``[[File:...]]``).
        signature: Signature appended to replies that carry none.

    Examples:
        FormatterConfig(paragraph_templates=("pb",), space_after_indentation=False)
    """

    paragraph_templates: tuple[str, ...] = ()
    space_after_indentation: bool = True
    file_namespaces: tuple[str, ...] = ("File", "Image")
    signature: str = DEFAULT_SIGNATURE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`signature` must not be empty")
    """


def load_config(search_path: Path) -> FormatterConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.wikitext-reply]`` table from `pyproject.toml` and the
    ``[wikitext-reply]`` or ``[tool.wikitext-reply]`` table from
    `.wikitext-reply.toml` when present. Returns default values when no
    configuration is found. TOML files that cannot be read or decoded are
    skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        FormatterConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a matching table is not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("talk-pages"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", "wikitext-reply")]
        )
        if pyproject_config is not None:
            return normalize_config(pyproject_config)

        dotfile_config = _load_from_file(
            current / ".wikitext-reply.toml",
            table_paths=[("wikitext-reply",), ("tool", "wikitext-reply")],
        )
        if dotfile_config is not None:
            return normalize_config(dotfile_config)

        parent = current.parent
        if parent == current:
            break
        current = parent

    return FormatterConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> FormatterConfig | None:
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
) -> FormatterConfig:
    table_display = ".".join(table_path)

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return FormatterConfig()

    try:
        return FormatterConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def normalize_config(config: FormatterConfig) -> FormatterConfig:
    """Convert list values (as read from TOML) to tuples."""
    paragraph_templates = config.paragraph_templates
    if isinstance(paragraph_templates, str):
        paragraph_templates = (paragraph_templates,)
    elif isinstance(paragraph_templates, list):
        paragraph_templates = tuple(paragraph_templates)

    file_namespaces = config.file_namespaces
    if isinstance(file_namespaces, str):
        file_namespaces = (file_namespaces,)
    elif isinstance(file_namespaces, list):
        file_namespaces = tuple(file_namespaces)

    return replace(
        config, paragraph_templates=paragraph_templates, file_namespaces=file_namespaces
    )


def validate_config(config: FormatterConfig) -> None:
    """Validate a `FormatterConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If a template or namespace name is empty or not a string,
            no file namespace is given, the space flag is not a boolean, or the
            signature is empty.

    Examples:
        validate_config(FormatterConfig(paragraph_templates=("pb",)))
    """
    config = normalize_config(config)

    if not isinstance(config.paragraph_templates, tuple):
        raise ConfigError("`paragraph_templates` must be a list of template names")
    _ensure_names("paragraph_templates", config.paragraph_templates)

    if not isinstance(config.file_namespaces, tuple) or not config.file_namespaces:
        raise ConfigError("`file_namespaces` must be a non-empty list of namespace names")
    _ensure_names("file_namespaces", config.file_namespaces)

    if not isinstance(config.space_after_indentation, bool):
        raise ConfigError("`space_after_indentation` must be a boolean")

    if not isinstance(config.signature, str) or not config.signature:
        raise ConfigError("`signature` must not be empty")


def apply_overrides(config: FormatterConfig, **overrides: object) -> FormatterConfig:
    """Apply override values to a `FormatterConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        FormatterConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `FormatterConfig`.

    Examples:
        updated = apply_overrides(config, paragraph_templates=("pb",))
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> FormatterConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        FormatterConfig: Validated configuration ready for formatting.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), signature="--~~~~~")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_names(key: str, names: tuple[object, ...]) -> None:
    for name in names:
        if not isinstance(name, str) or not name.strip():
            raise ConfigError(f"`{key}` entries must be non-empty strings")
