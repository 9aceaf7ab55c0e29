# scripts/db/seed_large_dataset.py
from datetime import date
from typing import Any
from app.db import DbManager
from common.logger import get_app_logger
from .seed_db import seed_db
from .data_template import DEFAULT_DATA_TEMPLATE

logger = get_app_logger(__name__)


async def seed_large_dataset(
    db_manager: DbManager,
    today: date,
    data_template: dict[str, dict[str, Any]] = DEFAULT_DATA_TEMPLATE,
    batch_size: int = 10_000,
    total_records: int = 100_000,
) -> int:
    """Seed in batches so only one batch is held in memory. Returns rows inserted."""
    inserted = 0

    for start_idx in range(0, total_records, batch_size):
        logger.info("Processing batch", batch=start_idx // batch_size + 1)

        results = await seed_db(
            db_manager=db_manager,
            data_template=data_template,
            records=min(batch_size, total_records - start_idx),
            today=today,
            start_index=start_idx,
            export_csv=True,
            csv_dir=f"data/seed/batch_{start_idx // batch_size}",
        )
        inserted += sum(len(objects) for objects in results.values())

    return inserted


__all__ = ["seed_large_dataset"]
