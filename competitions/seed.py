import logging
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from django.db import transaction
from django.utils import timezone

from . import catalog
from .models import Competition

logger = logging.getLogger(__name__)

SEED_FILE = Path(__file__).parent / "fixtures" / "seed_competitions.csv"

REQUIRED_COLUMNS = [
    "title",
    "short_description",
    "description",
    "category",
    "type",
    "entry_requirements",
    "prize",
    "deadline_days",
]


def load_seed_rows(path: Path | str = SEED_FILE) -> List[Dict[str, Any]]:
    """Read sample competitions from CSV, checking required columns."""
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise ValueError(f"Seed file is missing columns: {', '.join(missing_cols)}")
    return df.to_dict(orient="records")


def seed_competitions(path: Optional[Path | str] = None) -> Dict[str, Any]:
    """
    Populate an empty catalog with the sample competitions.

    Each row is created through `catalog.create`, so its deadline is
    today + `deadline_days` normalized to 23:59:59 local time, not the
    exact current time plus that many days.

    Returns:
        {"message": ...} when data already exists, otherwise
        {"success": True, "data": [...]} with the created rows.
    """
    if Competition.objects.exists():
        return {"message": "Competitions data already exists"}

    now = timezone.now()
    created = []
    with transaction.atomic():
        for row in load_seed_rows(path or SEED_FILE):
            data = {k: v for k, v in row.items() if k != "deadline_days"}
            data["deadline"] = now + timedelta(days=int(row["deadline_days"]))
            created.append(catalog.create(data))

    logger.info("Seeded %d competitions", len(created))
    return {"success": True, "data": [c.to_dict() for c in created]}
