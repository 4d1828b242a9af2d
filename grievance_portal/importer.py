# Community Grievance Portal — Seed Data Importer
# Populates MongoDB with the demo grievance set
#
# Usage:  python -m grievance_portal.importer [--reset]

import argparse

from pymongo import MongoClient

from grievance_portal.config import GRIEVANCE_TABLE, MONGODB_DB, MONGODB_URL
from grievance_portal.seed.grievances import SAMPLE_GRIEVANCES, import_grievances
from grievance_portal.store import GrievanceStore


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the grievance store with demo data")
    parser.add_argument("--reset", action="store_true", help="drop the grievance table first")
    args = parser.parse_args(argv)

    print("=" * 64)
    print("  Community Grievance Portal — Data Importer")
    print("=" * 64)

    print("\n[1/3] Connecting to MongoDB...")
    store = GrievanceStore(MongoClient(MONGODB_URL, tz_aware=True), MONGODB_DB)
    print(f"  Connected: {MONGODB_URL} / {MONGODB_DB}")

    print("\n[2/3] Preparing collection...")
    if args.reset:
        store.db[GRIEVANCE_TABLE].drop()
        print(f"  Dropped: {GRIEVANCE_TABLE}")
    store.create_indexes(GRIEVANCE_TABLE)

    print("\n[3/3] Grievances")
    inserted = import_grievances(store, GRIEVANCE_TABLE)
    for i, row in enumerate(inserted):
        print(f"    [{i+1:2d}/{len(SAMPLE_GRIEVANCES)}] {row['urgency']:6s}  {row['id'][:8]}  {row['content'][:52]}...")

    print("\n" + "=" * 64)
    print("  IMPORT COMPLETE")
    print("=" * 64)
    print(f"  Grievances:        {len(inserted)}")
    store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
