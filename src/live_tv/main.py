"""Headless admin commands for Live TV (no web server)."""

import argparse
import logging
import sys
from pathlib import Path

from .app import setup_logging
from .errors import ChannelError
from .models import init_db
from .storage import KeyValueStorage
from .store import ChannelStore

logger = logging.getLogger(__name__)

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Live TV channel directory admin")
    sub = p.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("list", help="List channels")
    ls.add_argument("--search", default="", help="Substring of name or description")
    ls.add_argument("--category", default="all")
    ls.add_argument("--type", default="all", choices=["all", "youtube", "facebook"])

    add = sub.add_parser("add", help="Add a channel")
    add.add_argument("name")
    add.add_argument("url")
    add.add_argument("--type", default="youtube", choices=["youtube", "facebook"])
    add.add_argument("--category", required=True)
    add.add_argument("--description", default="")
    add.add_argument("--inactive", action="store_true")

    rm = sub.add_parser("remove", help="Delete a channel")
    rm.add_argument("id", type=int)

    exp = sub.add_parser("export", help="Write all channels to a JSON backup file")
    exp.add_argument("-o", "--output-dir", default=".", help="Directory for the backup file")

    imp = sub.add_parser("import", help="Replace all channels from a JSON file")
    imp.add_argument("file")
    imp.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("backup", help="Save a local snapshot of all channels")
    sub.add_parser("stats", help="Show channel counts")

    clr = sub.add_parser("clear", help="Delete ALL channels and history")
    clr.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation")
    return p

def _confirm(prompt: str) -> bool:
    return input(f"{prompt} [y/N] ").strip().lower() in ("y", "yes")

def run_command(args, store: ChannelStore):
    """Execute one parsed command against ``store``."""
    if args.command == "list":
        for c in store.filter(args.search, args.category, args.type):
            print(f"{c.id:>6}  {c.type.value:<8}  {c.category:<14}  {c.status.value:<8}  {c.name}")

    elif args.command == "add":
        channel = store.add({
            'name': args.name,
            'url': args.url,
            'type': args.type,
            'category': args.category,
            'description': args.description,
            'status': 'inactive' if args.inactive else 'active',
        })
        print(f"Added channel {channel.id}: {channel.name}")

    elif args.command == "remove":
        channel = store.remove(args.id)
        print(f"Deleted channel {channel.id}: {channel.name}")

    elif args.command == "export":
        filename, document = store.export_document()
        path = Path(args.output_dir) / filename
        path.write_text(document, encoding="utf-8")
        print(f"Exported {len(store)} channels to {path}")

    elif args.command == "import":
        document = Path(args.file).read_bytes()
        confirm = None if args.yes else (
            lambda n: _confirm(f"Import {n} channels? This will replace your current channels."))
        result = store.import_channels(document, confirm=confirm)
        if result is None:
            print("Import cancelled")
        else:
            print(f"{len(result.accepted)} channels imported ({result.rejected_count} rejected)")

    elif args.command == "backup":
        snapshot = store.backup()
        print(f"Backed up {len(snapshot['channels'])} channels at {snapshot['timestamp']}")

    elif args.command == "stats":
        for key, value in store.stats().items():
            print(f"{key}: {value}")

    elif args.command == "clear":
        if args.yes or _confirm("Are you sure you want to clear ALL data? This cannot be undone!"):
            store.clear()
            print("All data cleared")

def main(argv=None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging()

    init_db()
    store = ChannelStore(KeyValueStorage())
    store.load()

    try:
        run_command(args, store)
    except (ChannelError, OSError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

if __name__ == "__main__":
    main()
