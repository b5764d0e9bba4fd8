#!/usr/bin/env python3
"""Compare locale key sets with each other and with the keys used in code."""
from dataclasses import dataclass


@dataclass(frozen=True)
class MissingKey:
    key: str
    missing_in: tuple


@dataclass(frozen=True)
class ReconciliationResult:
    missing_in_locales: tuple = ()
    missing_in_code: tuple = ()
    unused_keys: tuple = ()
    total_keys_found: int = 0
    unreadable_files: tuple = ()
    locales: tuple = ()

    @property
    def is_consistent(self):
        return not self.missing_in_locales and not self.missing_in_code

    @property
    def exit_code(self):
        """0 when no key is missing anywhere. Unused keys never fail the check."""
        return 0 if self.is_consistent else 1

    def missing_by_locale(self):
        """Group missing keys per locale, locales in configured order"""
        by_locale = {locale: [] for locale in self.locales}
        for missing in self.missing_in_locales:
            for locale in missing.missing_in:
                by_locale.setdefault(locale, []).append(missing.key)
        return {locale: keys for locale, keys in by_locale.items() if keys}


def reconcile(locale_keys, used_keys, ignored_unused_keys=frozenset(), unreadable_files=()):
    """Compute keys missing between locales, missing from all locales, and unused.

    ``locale_keys`` maps each locale, in configured order, to its flattened
    key paths in catalog order.
    """
    key_sets = {locale: set(keys) for locale, keys in locale_keys.items()}

    all_keys = []
    seen = set()
    for keys in locale_keys.values():
        for key in keys:
            if key not in seen:
                seen.add(key)
                all_keys.append(key)

    missing_in_locales = []
    for key in all_keys:
        missing_in = tuple(locale for locale, keys in key_sets.items() if key not in keys)
        if missing_in:
            missing_in_locales.append(MissingKey(key, missing_in))

    used_keys = set(used_keys)
    return ReconciliationResult(
        missing_in_locales=tuple(missing_in_locales),
        missing_in_code=tuple(sorted(used_keys - seen)),
        unused_keys=tuple(sorted(seen - used_keys - set(ignored_unused_keys))),
        total_keys_found=len(seen),
        unreadable_files=tuple(sorted(unreadable_files)),
        locales=tuple(locale_keys),
    )
