"""Maintenance commands for locale files.

    formlocale-i18n find-missing --source en --target es --dir ./locales
    formlocale-i18n validate --dir ./locales
    formlocale-i18n extract --dir ./src --output ./locales --format toml
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from collections.abc import Iterable, Sequence
from pathlib import Path

from formlocale.i18n.store import (
    LOCALE_SUFFIXES,
    LocaleLoadError,
    flatten_messages,
    parse_messages,
    save_toml,
)

logger = logging.getLogger(__name__)

# t("key"), tn("key", ...), tp("key", ...) and translate("key")
KEY_CALL_RE = re.compile(r"""\b(?:t|tn|tp|translate)\(\s*(["'])([^"'\n]+)\1""")
DEFAULT_SOURCE_SUFFIXES = (".py", ".html")


def find_locale_file(directory: Path, code: str) -> Path | None:
    for suffix in LOCALE_SUFFIXES:
        candidate = directory / f"{code}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def locale_files(directory: Path) -> list[Path]:
    return sorted(
        path for path in directory.iterdir()
        if path.is_file() and path.suffix in LOCALE_SUFFIXES
    )


def read_keys(path: Path) -> dict[str, str]:
    """Flattened messages of one locale file.

    Raises:
        LocaleLoadError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise LocaleLoadError(str(path), str(exc)) from exc
    return flatten_messages(parse_messages(text, path.suffix, str(path)))


def scan_keys(directory: Path, suffixes: Iterable[str] = DEFAULT_SOURCE_SUFFIXES) -> list[str]:
    """Sorted, de-duplicated message keys referenced by source files."""
    wanted = set(suffixes)
    keys: set[str] = set()
    for path in sorted(directory.rglob("*")):
        if not path.is_file() or path.suffix not in wanted:
            continue
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable source file %s: %s", path, exc)
            continue
        keys.update(match.group(2) for match in KEY_CALL_RE.finditer(text))
    return sorted(keys)


# -- commands ----------------------------------------------------------------


def cmd_find_missing(args: argparse.Namespace) -> int:
    directory = Path(args.dir)
    source_path = find_locale_file(directory, args.source)
    target_path = find_locale_file(directory, args.target)
    if source_path is None:
        print(f"Error: source locale '{args.source}' not found in {directory}")
        return 1
    if target_path is None:
        print(f"Error: target locale '{args.target}' not found in {directory}")
        return 1

    try:
        source_keys = set(read_keys(source_path))
        target_keys = set(read_keys(target_path))
    except LocaleLoadError as exc:
        print(f"Error: {exc}")
        return 1

    missing = sorted(source_keys - target_keys)
    extra = sorted(target_keys - source_keys)

    print(f"Comparing {args.source} -> {args.target}")
    print(f"Source file: {source_path}")
    print(f"Target file: {target_path}")
    print()
    if not missing and not extra:
        print("All keys are synchronized between locales")
        return 0
    if missing:
        print(f"Missing keys in {args.target} ({len(missing)}):")
        for key in missing:
            print(f"  - {key}")
    if extra:
        print(f"Extra keys in {args.target} ({len(extra)}):")
        for key in extra:
            print(f"  - {key}")
    return 1 if missing else 0


def cmd_validate(args: argparse.Namespace) -> int:
    directory = Path(args.dir)
    if not directory.is_dir():
        print(f"Error: {directory} is not a directory")
        return 1
    files = locale_files(directory)
    if not files:
        print(f"No locale files found in {directory}")
        return 0

    print(f"Validating {len(files)} locale file(s) in {directory}")
    failed = 0
    for path in files:
        try:
            messages = read_keys(path)
        except LocaleLoadError as exc:
            print(f"{path.name}: ERROR {exc.reason}")
            failed += 1
            continue
        empty = sorted(key for key, value in messages.items() if value == "")
        if empty:
            print(f"{path.name}: WARNING {len(empty)} empty value(s)")
            for key in empty:
                print(f"    - {key}")
        else:
            print(f"{path.name}: OK ({len(messages)} keys)")

    if failed:
        print(f"{failed} file(s) have errors")
        return 1
    print("All files are valid")
    return 0


def cmd_extract(args: argparse.Namespace) -> int:
    source_dir = Path(args.dir)
    if not source_dir.is_dir():
        print(f"Error: {source_dir} is not a directory")
        return 1

    keys = scan_keys(source_dir, args.ext or DEFAULT_SOURCE_SUFFIXES)
    if not keys:
        print("No translation keys found.")
        return 0

    output = Path(args.output) / f"{args.locale}.{args.format}"
    existing: dict[str, str] = {}
    if output.is_file():
        try:
            existing = read_keys(output)
        except LocaleLoadError as exc:
            print(f"Error: {exc}")
            return 1
    # existing translations are kept; new keys start empty
    messages = {**dict.fromkeys(keys, ""), **existing}

    if args.format == "toml":
        save_toml(output, args.locale, messages)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(
            json.dumps(messages, indent=2, sort_keys=True, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
    added = len(set(keys) - set(existing))
    print(f"Extracted {len(keys)} key(s) to {output} ({added} new)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formlocale-i18n",
        description="Manage formlocale locale files.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    find_missing = commands.add_parser(
        "find-missing", help="List keys present in one locale but not another."
    )
    find_missing.add_argument("--source", required=True, help="Reference locale, e.g. en.")
    find_missing.add_argument("--target", required=True, help="Locale to check, e.g. es.")
    find_missing.add_argument("--dir", default="./locales", help="Directory of locale files.")
    find_missing.set_defaults(handler=cmd_find_missing)

    validate = commands.add_parser(
        "validate", help="Check locale files for syntax errors and empty values."
    )
    validate.add_argument("--dir", default="./locales", help="Directory of locale files.")
    validate.set_defaults(handler=cmd_validate)

    extract = commands.add_parser(
        "extract", help="Collect message keys used in source files."
    )
    extract.add_argument("--dir", default="./src", help="Source directory to scan.")
    extract.add_argument("--output", default="./locales", help="Directory for the locale file.")
    extract.add_argument("--format", choices=("toml", "json"), default="toml")
    extract.add_argument("--locale", default="en", help="Locale code of the written file.")
    extract.add_argument(
        "--ext",
        action="append",
        help="Source file suffix to scan (repeatable, default: .py and .html).",
    )
    extract.set_defaults(handler=cmd_extract)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
