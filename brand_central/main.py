# main.py
import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import ProviderConfiguration, get_settings
from .exceptions import BrandCentralError
from .provider import BrandCentralProvider
from .storage.dto import ExternalSearchRequest
from .storage.local import LocalFileStore


def setup_logging():
    """Configures logging to console and, if configured, to a file."""
    settings = get_settings()
    log_level_name = settings.LOG_LEVEL.upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_name)

    # Clear any existing handlers to prevent duplicate logs on re-runs or implicit configs
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if settings.LOG_FILE:
        try:
            file_handler = logging.FileHandler(settings.LOG_FILE)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except IOError as e:
            root_logger.error(f"Failed to set up file logging to {settings.LOG_FILE}: {e}")

    # Reducing "noise" from third-party libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def build_provider() -> BrandCentralProvider:
    """Creates a provider from environment settings, backed by the local file store."""
    settings = get_settings()
    store = LocalFileStore(settings.LOCAL_STORE_DIR)
    return BrandCentralProvider(
        configuration=ProviderConfiguration.from_settings(settings),
        file_importer=store,
        filesystem=store,
        settings=settings,
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search, browse and import files from Brand Central."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("validate", help="Check that the credentials are configured.")

    details = subparsers.add_parser("details", help="Show the details of an asset.")
    details.add_argument("asset_id")

    search = subparsers.add_parser("search", help="Search assets.")
    search.add_argument("--keywords", default=None)
    search.add_argument("--file-type", default=None)
    search.add_argument("--order-by", default=None)
    search.add_argument("--order-by-direction", default=None, choices=["asc", "desc"])
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--items-per-page", type=int, default=20)

    subparsers.add_parser("file-types", help="List the available file types.")

    import_parser = subparsers.add_parser(
        "import", help="Import an asset file into the local file store."
    )
    import_parser.add_argument("file_id")
    import_parser.add_argument("folder_id")

    return parser.parse_args(argv)


def run_command(provider: BrandCentralProvider, args: argparse.Namespace) -> int:
    if args.command == "validate":
        config = provider.configuration
        errors = provider.validate_request(
            {
                "endpoint": config.endpoint,
                "clientId": config.client_id,
                "clientSecret": config.client_secret.get_secret_value(),
            }
        )
        for error in errors:
            print(error)
        if not errors and not provider.is_configured:
            print(f"Endpoint '{config.endpoint}' is not a valid URL.")
            return 1
        return 1 if errors else 0

    if not provider.is_configured:
        logging.critical(
            "Brand Central is not configured. Set BRAND_CENTRAL_ENDPOINT, "
            "BRAND_CENTRAL_CLIENT_ID and BRAND_CENTRAL_CLIENT_SECRET."
        )
        return 1

    if args.command == "details":
        print(provider.get_asset_details(args.asset_id).model_dump_json(indent=2))
    elif args.command == "search":
        search_request = ExternalSearchRequest(
            search_term=args.keywords,
            file_type=args.file_type,
            order_by=args.order_by,
            order_by_direction=args.order_by_direction,
            current_page=args.page,
            items_per_page=args.items_per_page,
        )
        print(provider.search_files(search_request).model_dump_json(indent=2))
    elif args.command == "file-types":
        print(json.dumps(provider.get_file_types(), indent=2))
    elif args.command == "import":
        file_version = provider.import_file(args.file_id, args.folder_id)
        if file_version is None:
            logging.warning(f"Brand Central returned no data for file {args.file_id}.")
            return 1
        print(file_version.get_file().path)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()

    provider = build_provider()
    try:
        return run_command(provider, args)
    except BrandCentralError as e:
        logging.error(f"{e.kind.value}: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
