#!/usr/bin/env python3
"""Load locale catalogs and flatten them into dot-joined key paths."""
import json
import logging

import yaml

logger = logging.getLogger(__name__)

MAX_DEPTH = 64


class CatalogLoadError(Exception):
    """A locale catalog could not be read or parsed. Fatal for the whole run."""

    def __init__(self, locale, path, cause):
        self.locale = locale
        self.path = path
        self.cause = cause
        super().__init__(f"Error loading {locale} catalog {path}: {cause}")


class CatalogStructureError(ValueError):
    """Raised when a catalog nests deeper than the flattener allows."""


def catalog_path(locale, config):
    return config.catalog_dir / f"{locale}.{config.catalog_extension}"


def load_catalog(locale, config):
    """Load the catalog document for one locale"""
    path = catalog_path(locale, config)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            if config.catalog_extension == "json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, ValueError, RecursionError, yaml.YAMLError) as e:
        raise CatalogLoadError(locale, path, e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogLoadError(
            locale, path, f"expected a mapping at the top level, got {type(data).__name__}"
        )
    return data


def load_catalogs(config):
    """Load every configured locale, in configured order"""
    return {locale: load_catalog(locale, config) for locale in config.locales}


def flatten_catalog(catalog, prefix='', max_depth=MAX_DEPTH):
    """Map every leaf key path of a nested catalog to its value.

    Anything that is not a mapping is a leaf, including ``None`` and lists.
    An empty nested mapping has no leaves and contributes nothing.
    """
    if max_depth < 0:
        raise CatalogStructureError(f"Catalog nesting too deep at {prefix!r}")

    leaves = {}
    for k, v in catalog.items():
        new_prefix = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            leaves.update(flatten_catalog(v, new_prefix, max_depth - 1))
        else:
            leaves[new_prefix] = v
    return leaves


def catalog_keys(catalog):
    return list(flatten_catalog(catalog))


def load_catalog_keys(config):
    """Return the ordered key paths of every configured locale"""
    keys_by_locale = {}
    for locale, catalog in load_catalogs(config).items():
        try:
            keys = catalog_keys(catalog)
        except CatalogStructureError as e:
            raise CatalogLoadError(locale, catalog_path(locale, config), e) from e
        logger.info("%s catalog has %d keys", locale, len(keys))
        keys_by_locale[locale] = keys
    return keys_by_locale
