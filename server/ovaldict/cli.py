"""
Command line entry point: `ovaldict server`.
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import Settings, default_db_path, default_log_dir
from .exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_USAGE_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ovaldict", description="OVAL dictionary")
    sub = parser.add_subparsers(dest="command")

    server = sub.add_parser("server", help="Start OVAL dictionary HTTP server")
    server.add_argument("--debug", action="store_true", help="debug mode")
    server.add_argument("--debug-sql", action="store_true", help="SQL debug mode")
    server.add_argument("--quiet", action="store_true", help="quiet mode (no console output)")
    server.add_argument("--log-dir", default=default_log_dir(), help="/path/to/log")
    server.add_argument("--dbpath", default=default_db_path(), help="/path/to/sqlite3 or SQL connection string")
    server.add_argument("--dbtype", default="sqlite3", help="Database type to store data in (sqlite3 or postgres)")
    server.add_argument("--bind", default="127.0.0.1", help="HTTP server bind address (default: loopback)")
    server.add_argument("--port", type=int, default=1324, help="HTTP server port number")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        debug=args.debug,
        debug_sql=args.debug_sql,
        quiet=args.quiet,
        log_dir=args.log_dir,
        db_path=args.dbpath,
        db_type=args.dbtype,
        bind=args.bind,
        port=args.port,
    )


def cmd_server(args: argparse.Namespace) -> int:
    from . import config
    from .log import configure_logging

    conf = settings_from_args(args)
    configure_logging(conf.log_dir, debug=conf.debug, quiet=conf.quiet)
    try:
        conf.validate_storage()
    except ConfigurationError as e:
        logger.error("%s", e)
        return EXIT_USAGE_ERROR

    # Facades and the app factory read the module-level settings.
    config.settings = conf

    from .app_factory import create_app
    from .db import open_database

    try:
        db = open_database(
            conf.db_type,
            conf.db_path,
            conf.debug_sql,
            auto_migrate=conf.db_auto_create_tables,
            require_up_to_date=conf.db_require_migrations_up_to_date,
        )
    except StorageError as e:
        logger.error("%s", e)
        return EXIT_FAILURE

    try:
        import uvicorn

        logger.info("Starting HTTP Server on %s:%s...", conf.bind, conf.port)
        uvicorn.run(create_app(db), host=conf.bind, port=conf.port, log_config=None)
    except (OSError, SystemExit) as e:
        logger.error("HTTP server failed: %s", e)
        return EXIT_FAILURE
    finally:
        try:
            db.close()
        except StorageError as e:
            logger.error("%s", e)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "server":
        return cmd_server(args)
    parser.print_help()
    return EXIT_USAGE_ERROR


if __name__ == "__main__":
    sys.exit(main())
