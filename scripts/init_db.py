# scripts/init_db.py
import asyncio
import argparse

from app.db import engine, create_db_and_tables
from app.models.base import Base


def print_model_columns():
    for table in Base.metadata.sorted_tables:
        print(f"🧩 {table.name}:")
        for col in table.columns:
            print(f"    - {col.name} ({col.type})")
        print()


async def create_tables():
    await create_db_and_tables()
    await engine.dispose()
    print("✅ All missing tables created.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the database schema")
    parser.add_argument("--show", action="store_true", help="Print tables and columns after creating them")
    args = parser.parse_args()

    asyncio.run(create_tables())
    if args.show:
        print_model_columns()
