"""
CLI entry point for Quick Alias.

Usage:
  python -m quick_alias open <file>              # Scan one note as if just opened
  python -m quick_alias scan                     # Scan every matching note
  python -m quick_alias watch                    # Scan the active note after edits
  python -m quick_alias config show              # Print the current settings
  python -m quick_alias config set-pattern <re>  # File name pattern
  python -m quick_alias config set-notice on|off # Summary notice after updates
  python -m quick_alias config set-debounce <ms> # Edit debounce, 1000-5000 ms
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from quick_alias.errors import ConfigError
from quick_alias.orchestrator import QuickAliasAgent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quick-alias",
        description="Quick Alias — merge wikilink aliases into the front-matter of linked notes.",
    )
    parser.add_argument(
        "--vault",
        type=Path,
        default=None,
        help="Path to the Obsidian vault (overrides QUICK_ALIAS_VAULT_PATH env var).",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    open_file = sub.add_parser("open", help="Scan a single note, as on file-open.")
    open_file.add_argument("file", type=Path, help="Path to the note.")
    sub.add_parser("scan", help="Scan every note whose name matches the file pattern.")
    sub.add_parser("watch", help="Watch the vault and scan the active note after edits.")

    settings = sub.add_parser("config", help="Show or change the plugin settings.")
    settings_sub = settings.add_subparsers(dest="action", required=True)
    settings_sub.add_parser("show", help="Print the current settings as JSON.")
    pattern = settings_sub.add_parser("set-pattern", help="Regex matched against note names.")
    pattern.add_argument("value", help="Regular expression; empty string restores the default.")
    notice = settings_sub.add_parser("set-notice", help="Toggle the update notice.")
    notice.add_argument("value", choices=["on", "off"])
    debounce = settings_sub.add_parser("set-debounce", help="Edit debounce in milliseconds.")
    debounce.add_argument("value", help="Milliseconds between 1000 and 5000.")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    agent = QuickAliasAgent(vault_path=args.vault)

    if args.command == "open":
        path = args.file
        if not path.is_absolute():
            path = (agent.vault.vault_path / path).resolve()
        if not path.exists():
            print(f"Error: file not found — {args.file}", file=sys.stderr)
            sys.exit(1)
        asyncio.run(agent.open_file(path))

    elif args.command == "scan":
        updated = asyncio.run(agent.scan_vault())
        print(f"Updated aliases in {updated} note(s).")

    elif args.command == "watch":
        print("Watching vault (Ctrl+C to stop)…")
        try:
            asyncio.run(agent.watch())
        except KeyboardInterrupt:
            print("\nStopped.")

    elif args.command == "config":
        try:
            if args.action == "set-pattern":
                agent.settings.set_file_pattern(args.value)
            elif args.action == "set-notice":
                agent.settings.set_show_notice(args.value == "on")
            elif args.action == "set-debounce":
                agent.settings.set_debounce(args.value)
        except ConfigError:
            sys.exit(1)
        print(json.dumps(agent.settings.config.to_data(), indent=2))


if __name__ == "__main__":
    main()
