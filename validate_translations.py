#!/usr/bin/env python3
"""Check that locale catalogs match the translation keys used in the source tree.

Exits 0 when every used key exists in every locale, 1 otherwise. Keys that
exist in the catalogs but are never used are reported as a warning only.
"""
import logging
import os
import sys

from find_used_keys import find_source_files, scan_used_keys
from language_keys import CatalogLoadError, load_catalog_keys
from reconcile_keys import reconcile
from translation_config import ConfigError, load_config

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "TRANSLATION_CHECK_LOG_LEVEL"


def validate_translations(config):
    """Run the whole check and return the reconciliation result.

    Raises CatalogLoadError before anything is compared if a catalog is
    missing or broken.
    """
    locale_keys = load_catalog_keys(config)

    files = find_source_files(config.source_patterns, config.ignore_patterns)
    scan = scan_used_keys(files, config.pattern_rules)

    return reconcile(
        locale_keys,
        scan.used_keys,
        ignored_unused_keys=config.ignored_unused_keys,
        unreadable_files=scan.unreadable_files,
    )


def report_results(result, out=None):
    """Print the result and return the process exit code"""
    out = out or sys.stdout

    def emit(line=''):
        print(line, file=out)

    emit("Translation statistics:")
    emit(f"Total translation keys: {result.total_keys_found}")
    emit(f"Missing keys: {len(result.missing_in_locales)}")
    emit(f"Unused keys: {len(result.unused_keys)}")
    emit()

    if result.unreadable_files:
        emit(f"WARNING: {len(result.unreadable_files)} source files could not be read:")
        for path in result.unreadable_files:
            emit(f"  - {path}")
        emit()

    if result.is_consistent:
        emit("All translations are complete and consistent!")
        if result.unused_keys:
            emit()
            emit(f"WARNING: Found {len(result.unused_keys)} unused keys:")
            for key in result.unused_keys:
                emit(f"  - {key}")
        return result.exit_code

    if result.missing_in_locales:
        emit("=== MISSING KEYS BETWEEN LOCALES ===")
        for locale, keys in result.missing_by_locale().items():
            emit(f"Missing in {locale.upper()}:")
            for key in keys:
                emit(f"  - {key}")
            emit()

    if result.missing_in_code:
        emit("=== KEYS USED IN CODE BUT MISSING FROM ALL LOCALES ===")
        for key in result.missing_in_code:
            emit(f"  - {key}")
        emit()

    return result.exit_code


def main():
    logging.basicConfig(
        level=os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config()
        print("Validating translation completeness...")
        result = validate_translations(config)
    except (ConfigError, CatalogLoadError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return report_results(result)


if __name__ == "__main__":
    sys.exit(main())
