#!/usr/bin/env python3
"""Scan source files for translation keys passed to the translate function."""
import glob
import logging
import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path

logger = logging.getLogger(__name__)


class SourceReadError(Exception):
    """A source file could not be read. The scan carries on without it."""

    def __init__(self, path, cause):
        self.path = path
        self.cause = cause
        super().__init__(f"Error processing {path}: {cause}")


def _closing_brace(pattern, start):
    depth = 0
    for i in range(start, len(pattern)):
        if pattern[i] == '{':
            depth += 1
        elif pattern[i] == '}':
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_alternatives(body):
    parts = []
    depth = 0
    current = ''
    for ch in body:
        if ch == ',' and depth == 0:
            parts.append(current)
            current = ''
            continue
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
        current += ch
    parts.append(current)
    return parts


def expand_braces(pattern):
    """Expand shell-style ``{a,b}`` alternatives, which glob does not understand"""
    start = pattern.find('{')
    while start != -1:
        end = _closing_brace(pattern, start)
        if end == -1:
            break
        alternatives = _split_alternatives(pattern[start + 1:end])
        if len(alternatives) > 1:
            head, tail = pattern[:start], pattern[end + 1:]
            expanded = []
            for alternative in alternatives:
                for candidate in expand_braces(head + alternative + tail):
                    if candidate not in expanded:
                        expanded.append(candidate)
            return expanded
        start = pattern.find('{', start + 1)
    return [pattern]


GLOB_MAGIC = ('*', '?', '[')


def glob_base(pattern):
    """Return the directory a glob pattern starts from, before its first wildcard"""
    base_parts = []
    for part in Path(pattern).parts[:-1]:
        if any(magic in part for magic in GLOB_MAGIC):
            break
        base_parts.append(part)
    return Path(os.path.abspath(Path(*base_parts) if base_parts else '.'))


def is_ignored(path, ignore_patterns, base):
    """Match ignore patterns against the path relative to the scanned tree.

    Folders above ``base`` never cause a file to be ignored. A leading
    ``**/`` also matches at the top of the tree, so ``**/dist/**`` covers
    ``<base>/dist/...``.
    """
    try:
        relative = Path(path).relative_to(base).as_posix()
    except ValueError:
        relative = Path(path).as_posix()
    for pattern in ignore_patterns:
        if fnmatchcase(relative, pattern):
            return True
        if pattern.startswith('**/') and fnmatchcase(relative, pattern[3:]):
            return True
    return False


def find_source_files(patterns, ignore_patterns=()):
    """Find all source files matching the patterns, each file only once"""
    files = []
    seen = set()
    for pattern in patterns:
        matches = {}
        for expanded in expand_braces(pattern):
            base = glob_base(expanded)
            for match in glob.glob(expanded, recursive=True):
                matches.setdefault(os.path.abspath(match), base)

        candidates = [
            match
            for match, base in sorted(matches.items())
            if os.path.isfile(match) and not is_ignored(match, ignore_patterns, base)
        ]
        logger.info("Found %d files to process for %s", len(candidates), pattern)

        for candidate in candidates:
            resolved = Path(candidate).resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            files.append(resolved)
    return files


def read_source(path):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(path, e) from e


def extract_keys(text, rules):
    """Extract every key captured by any of the rules.

    ``findall`` starts from the beginning of ``text`` on every call, so a
    rule never carries a scan position over from a previous file.
    """
    keys = set()
    for rule in rules:
        keys.update(rule.findall(text))
    return keys


@dataclass(frozen=True)
class ScanResult:
    used_keys: frozenset = frozenset()
    files_scanned: int = 0
    unreadable_files: tuple = ()

    def merge(self, other):
        return ScanResult(
            used_keys=self.used_keys | other.used_keys,
            files_scanned=self.files_scanned + other.files_scanned,
            unreadable_files=tuple(sorted(set(self.unreadable_files) | set(other.unreadable_files))),
        )


def scan_used_keys(files, rules):
    """Collect the keys used across all files"""
    used_keys = set()
    unreadable = []
    scanned = 0
    for path in files:
        try:
            content = read_source(path)
        except SourceReadError as e:
            logger.error("%s", e)
            unreadable.append(str(path))
            continue
        scanned += 1
        used_keys.update(extract_keys(content, rules))

    logger.info("Found %d unique translation keys used in %d files", len(used_keys), scanned)
    return ScanResult(
        used_keys=frozenset(used_keys),
        files_scanned=scanned,
        unreadable_files=tuple(sorted(unreadable)),
    )
