# seed_db.py
"""
Database Seeding Script
=======================

Command-line utilities to seed the clinic database with either a small
dataset (development/demo) or a large one (query performance testing).

Both modes insert doctors with fee policies, patients, and a history of
completed visits and return visits ending at the seed date.

Usage:
    python seed_db.py small --records 50 --export-csv --csv-dir data/output
    python seed_db.py large --batch-size 10000 --total-records 100000
    python seed_db.py small --records 20 --today 2025-01-31

Requirements:
    - A valid database configuration (environment variables or .env).
    - An up-to-date schema (``alembic upgrade head``); sqlite databases are
      created from the models.
"""

import sys
import argparse
import asyncio
from datetime import date
from scripts.db import seed_db, seed_large_dataset, DEFAULT_DATA_TEMPLATE
from app.db import DbManager
from common.config import DatabaseConfig, get_config, initialize_config
from common.api_error import ConfigurationError
from common.logger import get_app_logger
from dotenv import load_dotenv

logger = get_app_logger(__name__)


def get_db_config() -> DatabaseConfig:
    """
    Load and validate database configuration.

    Raises:
        SystemExit: If configuration cannot be loaded or has no database.
    """
    db_cfg = get_config().database
    if db_cfg is None:
        print("FATAL: Database configuration required (DB_HOST is not set)")
        sys.exit(1)
    return db_cfg


async def _connect(db_config: DatabaseConfig) -> DbManager:
    db_manager = DbManager.from_config(db_config)
    await db_manager.verify_connection()
    if db_manager.is_sqlite:
        await db_manager.create_all()
    return db_manager


async def run_seed_db(
    db_config: DatabaseConfig,
    records: int,
    today: date,
    export_csv: bool,
    csv_dir: str,
) -> None:
    db_manager = await _connect(db_config)
    try:
        results = await seed_db(
            db_manager=db_manager,
            data_template=DEFAULT_DATA_TEMPLATE,
            records=records,
            today=today,
            export_csv=export_csv,
            csv_dir=csv_dir,
        )
        logger.info(
            "Seeding finished",
            **{table: len(objects) for table, objects in results.items()},
        )
    finally:
        await db_manager.dispose()


async def run_seed_large(
    db_config: DatabaseConfig,
    batch_size: int,
    total_records: int,
    today: date,
) -> None:
    db_manager = await _connect(db_config)
    try:
        inserted = await seed_large_dataset(
            db_manager=db_manager,
            today=today,
            data_template=DEFAULT_DATA_TEMPLATE,
            batch_size=batch_size,
            total_records=total_records,
        )
        logger.info("Large seeding finished", rows=inserted)
    finally:
        await db_manager.dispose()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed the clinic database")
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Last day of the generated visit history (YYYY-MM-DD, default: today)",
    )
    subparsers = parser.add_subparsers(dest="mode", required=True)

    small_parser = subparsers.add_parser("small", help="Seed a small dataset")
    small_parser.add_argument(
        "--records",
        type=int,
        required=True,
        help="Number of doctors and patients to insert (REQUIRED)",
    )
    small_parser.add_argument(
        "--export-csv", action="store_true", help="Export seeded data to CSV"
    )
    small_parser.add_argument(
        "--csv-dir", type=str, default="data/seed", help="Directory to export CSV files"
    )

    large_parser = subparsers.add_parser("large", help="Seed a large dataset")
    large_parser.add_argument(
        "--batch-size",
        type=int,
        required=True,
        help="Batch size for inserts (REQUIRED)",
    )
    large_parser.add_argument(
        "--total-records",
        type=int,
        required=True,
        help="Total number of patients to insert (REQUIRED)",
    )
    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)
    db_config = get_db_config()
    today = args.today or date.today()

    if args.mode == "small":
        asyncio.run(
            run_seed_db(db_config, args.records, today, args.export_csv, args.csv_dir)
        )
    elif args.mode == "large":
        asyncio.run(run_seed_large(db_config, args.batch_size, args.total_records, today))


if __name__ == "__main__":
    try:
        load_dotenv()
        initialize_config()
    except ConfigurationError as e:
        print(f"FATAL: Configuration error:\n{e}")
        sys.exit(1)
    main()
