from __future__ import annotations

import textwrap
import pytest
from pathlib import Path

from wikitext_reply.config import (
    ConfigError,
    FormatterConfig,
    apply_overrides,
    build_config,
    load_config,
    validate_config,
)


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def _write_dotfile(base: Path, body: str) -> Path:
    path = base / ".wikitext-reply.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


def test_loads_config_from_pyproject(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.wikitext-reply]
        paragraph_templates = ["pb", "paragraph break"]
        space_after_indentation = false
        file_namespaces = ["File", "Image", "Datei"]
        signature = "~~~~"
        """,
    )

    config = load_config(tmp_path)

    assert config == FormatterConfig(
        paragraph_templates=("pb", "paragraph break"),
        space_after_indentation=False,
        file_namespaces=("File", "Image", "Datei"),
        signature="~~~~",
    )


def test_loads_config_from_dotfile(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [wikitext-reply]
        paragraph_templates = ["pb"]
        """,
    )

    config = load_config(tmp_path)

    assert config.paragraph_templates == ("pb",)
    assert config.space_after_indentation is True


def test_pyproject_takes_precedence_over_dotfile(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.wikitext-reply]
        signature = "--~~~~~"
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [wikitext-reply]
        signature = "~~~"
        """,
    )

    assert load_config(tmp_path).signature == "--~~~~~"


def test_pyproject_without_table_falls_back_to_dotfile(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.other]
        key = "value"
        """,
    )
    _write_dotfile(
        tmp_path,
        """
        [tool.wikitext-reply]
        space_after_indentation = false
        """,
    )

    assert load_config(tmp_path).space_after_indentation is False


def test_config_is_found_in_parent_directory(tmp_path: Path):
    _write_dotfile(
        tmp_path,
        """
        [wikitext-reply]
        paragraph_templates = ["pb"]
        """,
    )
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert load_config(nested).paragraph_templates == ("pb",)


def test_empty_table_returns_defaults(tmp_path: Path):
    _write_dotfile(tmp_path, "[wikitext-reply]\n")

    assert load_config(tmp_path) == FormatterConfig()


def test_invalid_toml_is_skipped(tmp_path: Path):
    _write_dotfile(tmp_path, "[wikitext-reply\nbroken")

    assert load_config(tmp_path) == FormatterConfig()


def test_unknown_keys_raise(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool.wikitext-reply]
        unknown = 1
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_non_table_value_raises(tmp_path: Path):
    _write_pyproject(
        tmp_path,
        """
        [tool]
        wikitext-reply = "yes"
        """,
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "config",
    [
        FormatterConfig(paragraph_templates=("",)),
        FormatterConfig(file_namespaces=()),
        FormatterConfig(file_namespaces=("File", 3)),
        FormatterConfig(space_after_indentation="yes"),
        FormatterConfig(signature=""),
    ],
)
def test_validate_config_rejects_invalid_values(config: FormatterConfig):
    with pytest.raises(ConfigError):
        validate_config(config)


def test_validate_config_accepts_defaults():
    validate_config(FormatterConfig())


def test_apply_overrides_ignores_none():
    config = FormatterConfig()

    assert apply_overrides(config, paragraph_templates=None) is config
    assert apply_overrides(config, signature="~~~~").signature == "~~~~"


def test_build_config_applies_and_validates_overrides(tmp_path: Path):
    config = build_config(tmp_path, paragraph_templates=["pb"])

    assert config.paragraph_templates == ("pb",)

    with pytest.raises(ConfigError):
        build_config(tmp_path, signature="")
