"""Tests for loading and validating the check configuration."""

from __future__ import annotations

import dataclasses

import pytest
import yaml

from translation_config import (
    CONFIG_FILENAME,
    DEFAULT_PATTERN_RULES,
    ConfigError,
    TranslationConfig,
    compile_rules,
    load_config,
)


def test_compile_rules_requires_one_group() -> None:
    assert len(compile_rules(DEFAULT_PATTERN_RULES)) == len(DEFAULT_PATTERN_RULES)

    with pytest.raises(ConfigError, match="exactly one capture group"):
        compile_rules([r"t\('[^']+'\)"])
    with pytest.raises(ConfigError, match="exactly one capture group"):
        compile_rules([r"(t)\('([^']+)'\)"])


def test_compile_rules_rejects_invalid_regex() -> None:
    with pytest.raises(ConfigError, match="Invalid pattern rule"):
        compile_rules([r"t\(('"])


def test_defaults_without_config_file(tmp_path) -> None:
    config = load_config(base_dir=tmp_path)

    assert config.locales == ("en", "fi")
    assert config.catalog_dir == tmp_path.resolve() / "i18n" / "messages"
    assert config.catalog_extension == "json"
    assert config.source_patterns == (
        (tmp_path.resolve() / "app/**/*.{ts,tsx,js,jsx}").as_posix(),
    )
    assert config.ignore_patterns == ("**/node_modules/**", "**/dist/**")
    assert config.ignored_unused_keys == frozenset()


def test_load_config_from_yaml(tmp_path) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        yaml.safe_dump(
            {
                "locales": ["en", "de", "sv"],
                "catalog_dir": "locales",
                "catalog_extension": "yml",
                "source_patterns": ["src/**/*.py"],
                "pattern_rules": [r"""_\(['"]([^'"]+)['"]\)"""],
                "ignored_unused_keys": ["meta.version"],
            }
        ),
        encoding="utf-8",
    )

    config = load_config(base_dir=tmp_path)

    assert config.locales == ("en", "de", "sv")
    assert config.catalog_dir == tmp_path.resolve() / "locales"
    assert config.catalog_extension == "yml"
    assert config.source_patterns == ((tmp_path.resolve() / "src/**/*.py").as_posix(),)
    assert [rule.pattern for rule in config.pattern_rules] == [
        r"""_\(['"]([^'"]+)['"]\)"""
    ]
    assert config.ignored_unused_keys == frozenset({"meta.version"})


@pytest.mark.parametrize(
    "document",
    [
        "- just\n- a list\n",
        "locales: []\n",
        "locales: [en, en]\n",
        "locales: en\n",
        "catalog_extension: xml\n",
        "source_patterns: []\n",
        "pattern_rules: ['no groups']\n",
        "locales: [en\n",
    ],
)
def test_invalid_config_documents(tmp_path, document: str) -> None:
    path = tmp_path / CONFIG_FILENAME
    path.write_text(document, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_explicit_config_file(tmp_path) -> None:
    with pytest.raises(ConfigError, match="Cannot read"):
        load_config(tmp_path / "nope.yml")


def test_config_is_immutable() -> None:
    config = TranslationConfig()

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.locales = ("sv",)
