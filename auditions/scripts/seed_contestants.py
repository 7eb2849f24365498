import argparse
import json
import logging
import sys
from pathlib import Path

from sqlalchemy.orm import Session

from auditions.databases.database import sessionLocal, engine
import auditions.databases.model as models

# Configure logging to show INFO level logs to stdout
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)

# Registration exports use the form's field names
FIELD_MAP = {
    "roll": "roll",
    "name": "name",
    "year": "year",
    "branch": "branch",
    "sec": "section",
    "section": "section",
    "preferredposition": "preferred_position",
    "preferred_position": "preferred_position",
    "whatsapp": "whatsapp",
    "mail": "mail",
}


def to_row(entry: dict) -> dict:
    row = {}
    for key, value in entry.items():
        column = FIELD_MAP.get(key)
        if column:
            row[column] = str(value).strip() if value is not None else ""
    row["roll"] = row.get("roll", "").upper()
    return row


def seed_contestants(db: Session, entries: list) -> int:
    """Insert new contestants; existing roll numbers are left untouched"""
    added = 0
    # Pending rows are invisible to db.get() until flushed
    seen = set()
    for entry in entries:
        row = to_row(entry)
        if not row.get("roll") or not row.get("name") or not row.get("preferred_position"):
            logging.warning(f"Skipping incomplete entry: {entry}")
            continue
        if row["roll"] in seen:
            logging.info(f"Duplicate roll {row['roll']} in import, keeping the first entry")
            continue
        seen.add(row["roll"])
        if db.get(models.Contestant, row["roll"]) is not None:
            logging.info(f"Contestant {row['roll']} already registered, skipping")
            continue
        db.add(models.Contestant(**row))
        added += 1

    db.commit()
    logging.info(f"Seeded {added} contestants")
    return added


def main():
    parser = argparse.ArgumentParser(description="Load registered contestants from a JSON export")
    parser.add_argument("file", type=Path, help="JSON file holding a list of contestant objects")
    args = parser.parse_args()

    entries = json.loads(args.file.read_text(encoding="utf-8"))

    models.Base.metadata.create_all(bind=engine)
    db = sessionLocal()
    try:
        seed_contestants(db, entries)
    except Exception as e:
        db.rollback()
        logging.error(f"Seeding failed: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
