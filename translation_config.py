#!/usr/bin/env python3
"""Settings for the translation key check: locales, catalogs, sources and rules."""
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

CONFIG_FILENAME = "translation-config.yml"
CATALOG_EXTENSIONS = ("json", "yml", "yaml")

DEFAULT_LOCALES = ("en", "fi")
DEFAULT_CATALOG_DIR = "i18n/messages"
DEFAULT_SOURCE_PATTERNS = ("app/**/*.{ts,tsx,js,jsx}",)
DEFAULT_IGNORE_PATTERNS = ("**/node_modules/**", "**/dist/**")

DEFAULT_PATTERN_RULES = (
    # t('key')
    r"""(?:^|[\s{(])\bt\(['"`]([^'"`]+)['"`]\)""",
    # t('key', { count })
    r"""(?:^|[\s{(])\bt\(['"`]([^'"`]+)['"`],\s*{[^}]+}\)""",
    # const { t } = useTranslation(); t('key')
    r"""useTranslation\(\).*?\bt\(['"`]([^'"`]+)['"`]\)""",
    # <input placeholder={t('key')} />
    r"""(?:text|label|title|placeholder|aria-label)=\{t\(['"`]([^'"`]+)['"`]\)\}""",
    # <p>{t('key')}</p>
    r"""(?:^|[>\s{])\bt\(['"`]([^'"`]+)['"`]\)(?=\s*[}<]|$)""",
)


class ConfigError(Exception):
    """Raised when the translation check configuration is invalid."""


def compile_rules(patterns):
    """Compile extraction rules, each of which must capture exactly one group"""
    rules = []
    for pattern in patterns:
        if isinstance(pattern, re.Pattern):
            compiled = pattern
        elif isinstance(pattern, str):
            try:
                compiled = re.compile(pattern)
            except re.error as e:
                raise ConfigError(f"Invalid pattern rule {pattern!r}: {e}") from e
        else:
            raise ConfigError(f"Pattern rule must be a string, got {type(pattern).__name__}")
        if compiled.groups != 1:
            raise ConfigError(
                f"Pattern rule {compiled.pattern!r} must have exactly one capture group, "
                f"found {compiled.groups}"
            )
        rules.append(compiled)
    return tuple(rules)


@dataclass(frozen=True)
class TranslationConfig:
    locales: tuple = DEFAULT_LOCALES
    catalog_dir: Path = Path(DEFAULT_CATALOG_DIR)
    catalog_extension: str = "json"
    source_patterns: tuple = DEFAULT_SOURCE_PATTERNS
    ignore_patterns: tuple = DEFAULT_IGNORE_PATTERNS
    pattern_rules: tuple = field(default_factory=lambda: compile_rules(DEFAULT_PATTERN_RULES))
    ignored_unused_keys: frozenset = frozenset()

    def __post_init__(self):
        # Normalise containers so callers may pass lists and plain strings.
        object.__setattr__(self, "locales", tuple(self.locales))
        object.__setattr__(self, "catalog_dir", Path(self.catalog_dir))
        object.__setattr__(self, "source_patterns", tuple(self.source_patterns))
        object.__setattr__(self, "ignore_patterns", tuple(self.ignore_patterns))
        object.__setattr__(self, "pattern_rules", compile_rules(self.pattern_rules))
        object.__setattr__(self, "ignored_unused_keys", frozenset(self.ignored_unused_keys))

        if not self.locales:
            raise ConfigError("At least one locale must be configured")
        if len(set(self.locales)) != len(self.locales):
            raise ConfigError(f"Duplicate locales in {list(self.locales)}")
        if self.catalog_extension not in CATALOG_EXTENSIONS:
            raise ConfigError(
                f"Unsupported catalog extension {self.catalog_extension!r}, "
                f"expected one of {', '.join(CATALOG_EXTENSIONS)}"
            )
        if not self.source_patterns:
            raise ConfigError("At least one source pattern must be configured")


def _string_list(data, name, default):
    value = data.get(name)
    if value is None:
        return default
    if isinstance(value, str) or not isinstance(value, list):
        raise ConfigError(f"'{name}' must be a list")
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{name}' must contain only strings")
    return tuple(value)


def _resolve(base_dir, pattern):
    path = Path(pattern)
    if path.is_absolute():
        return pattern
    return (Path(base_dir) / pattern).as_posix()


def config_from_mapping(data, base_dir="."):
    """Build a TranslationConfig from a parsed config document"""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration document must be a mapping")

    base_dir = Path(base_dir).resolve()
    catalog_dir = data.get("catalog_dir", DEFAULT_CATALOG_DIR)
    if not isinstance(catalog_dir, str):
        raise ConfigError("'catalog_dir' must be a string")
    catalog_extension = str(data.get("catalog_extension", "json")).lstrip(".")

    source_patterns = _string_list(data, "source_patterns", DEFAULT_SOURCE_PATTERNS)
    return TranslationConfig(
        locales=_string_list(data, "locales", DEFAULT_LOCALES),
        catalog_dir=base_dir / catalog_dir,
        catalog_extension=catalog_extension,
        source_patterns=tuple(_resolve(base_dir, p) for p in source_patterns),
        ignore_patterns=_string_list(data, "ignore_patterns", DEFAULT_IGNORE_PATTERNS),
        pattern_rules=_string_list(data, "pattern_rules", DEFAULT_PATTERN_RULES),
        ignored_unused_keys=_string_list(data, "ignored_unused_keys", ()),
    )


def load_config(path=None, base_dir=None):
    """Load the configuration file, or the defaults when there is none"""
    base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
    if path is None:
        path = base_dir / CONFIG_FILENAME
        if not path.exists():
            return config_from_mapping({}, base_dir)
    path = Path(path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse config file {path}: {e}") from e

    return config_from_mapping(data, path.resolve().parent)
