#!/usr/bin/env python3
"""
Command-line interface for Inventory Catalog
"""
import sys
import argparse
from pathlib import Path

from .config import load_settings
from .errors import PersistenceReadFailure, PersistenceWriteFailure
from .store import InventoryStore, save_json
from .validation import validate_inventory


def init_inventory(directory: Path) -> int:
    """Create a cache directory with an empty inventory document."""
    directory = Path(directory).resolve()

    if not directory.exists():
        directory.mkdir(parents=True)
        print(f"✅ Created directory: {directory}")

    store = InventoryStore(directory)
    if store.document_path.exists():
        print(f"ℹ️  {store.document_path} already exists, leaving it untouched")
        return 0

    try:
        save_json([], store.document_path)
    except PersistenceWriteFailure as e:
        print(f"❌ {e}")
        return 1

    print(f"✅ Created {store.document_path}")
    print(f"\n🎉 Inventory initialized in {directory}")
    print(f"\nNext step:")
    print(f"  inventory-catalog serve --cache {directory}")
    return 0


def validate_command(directory: Path) -> int:
    """Check the inventory document against the photo files on disk."""
    directory = Path(directory).resolve()

    if not directory.exists():
        print(f"❌ Directory {directory} does not exist")
        return 1

    store = InventoryStore(directory)
    print(f"🔍 Validating {store.document_path}...")

    try:
        issues = validate_inventory(store)
    except PersistenceReadFailure as e:
        print(f"❌ {e}")
        return 1

    if issues:
        print(f"\n⚠️  Found {len(issues)} issue(s):")
        for issue in issues[:20]:  # Limit to first 20
            print(f"   {issue}")
        if len(issues) > 20:
            print(f"   ... and {len(issues) - 20} more")
        return 1

    print(f"✅ {len(store.list())} item(s), no validation issues found!")
    return 0


def serve_command(host: str = None, port: int = None, cache: Path = None, reset_on_corrupt: bool = None) -> int:
    """Start the inventory API server."""
    settings = load_settings(host=host, port=port, cache_dir=cache, reset_on_corrupt=reset_on_corrupt)

    print(f"🚀 Starting Inventory API Server...")
    print(f"📂 Cache directory: {settings.cache_dir}")
    print(f"🌐 Server running at: http://{settings.host}:{settings.port}")
    print(f"📖 API documentation: http://{settings.host}:{settings.port}/docs")
    print(f"📝 Register form: http://{settings.host}:{settings.port}/RegisterForm.html")
    print(f"🔎 Search form: http://{settings.host}:{settings.port}/SearchForm.html")
    print(f"Press Ctrl+C to stop\n")

    import uvicorn
    from .api_server import create_app

    try:
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    except KeyboardInterrupt:
        print("\n\n👋 Server stopped")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser_cli = argparse.ArgumentParser(
        description="Inventory Catalog - Inventory items with photos over HTTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create an empty inventory
  inventory-catalog init ./cache

  # Check the inventory for missing or orphaned photos
  inventory-catalog validate ./cache

  # Start the API server
  inventory-catalog serve --host 127.0.0.1 --port 3000 --cache ./cache
        """
    )

    subparsers = parser_cli.add_subparsers(dest='command', help='Command to run')

    # Init command
    init_parser = subparsers.add_parser('init', help='Initialize an empty inventory')
    init_parser.add_argument('directory', type=Path, help='Cache directory to initialize')

    # Validate command
    validate_parser = subparsers.add_parser('validate', help='Validate inventory against photo files')
    validate_parser.add_argument('directory', type=Path, help='Cache directory to validate')

    # Serve command
    serve_parser = subparsers.add_parser('serve', help='Start API server')
    serve_parser.add_argument('--host', '-H', type=str, help='Host address (default: 0.0.0.0)')
    serve_parser.add_argument('--port', '-p', type=int, help='Port number (default: $PORT or 3000)')
    serve_parser.add_argument('--cache', '-c', type=Path, help='Cache directory (default: ./cache)')
    serve_parser.add_argument('--reset-on-corrupt', action='store_true', default=None,
                              help='Move an unreadable inventory.json aside and start empty')

    args = parser_cli.parse_args()

    if args.command == 'init':
        return init_inventory(args.directory)
    elif args.command == 'validate':
        return validate_command(args.directory)
    elif args.command == 'serve':
        return serve_command(args.host, args.port, args.cache, args.reset_on_corrupt)
    else:
        parser_cli.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
