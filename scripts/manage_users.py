# scripts/manage_users.py

import asyncio
import argparse
import sys
from sqlalchemy.future import select

from app.auth.seed import create_account
from app.db import async_session, create_db_and_tables
from app.models.account import Account, AccountRole
from app.models.profiles import RestaurantProfile

# 🎯 DEMO ACCOUNTS TO SEED
ACCOUNTS_TO_SEED = [
    {"name": "Demo Customer", "email": "customer@example.com", "password": "customer123", "role": AccountRole.CUSTOMER},
    {"name": "Demo Rider", "email": "rider@example.com", "password": "rider123", "role": AccountRole.RIDER},
    {"name": "Demo Kitchen", "email": "kitchen@example.com", "password": "kitchen123", "role": AccountRole.RESTAURANT,
     "latitude": 40.7128, "longitude": -74.0060},
]

if sys.platform.startswith('win') and sys.version_info < (3, 10):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


async def seed_accounts():
    await create_db_and_tables()
    for data in ACCOUNTS_TO_SEED:
        account = await create_account(data["email"], data["password"], data["name"], role=data["role"])
        if account is None:
            print(f"⚠️  {data['email']} already exists. Skipping.")
            continue
        print(f"✅ Created: {account.email} ({account.role.value})")

        if "latitude" in data:
            async with async_session() as session:
                result = await session.execute(
                    select(RestaurantProfile).where(RestaurantProfile.account_id == account.id)
                )
                profile = result.scalar_one_or_none()
                if profile:
                    profile.latitude = data["latitude"]
                    profile.longitude = data["longitude"]
                    await session.commit()
    print("✅ Done seeding accounts.\n")


async def delete_accounts(email=None, role=None):
    async with async_session() as session:
        if email:
            result = await session.execute(select(Account).where(Account.email == email))
            accounts = result.unique().scalars().all()
        elif role:
            result = await session.execute(select(Account).where(Account.role == AccountRole(role)))
            accounts = result.unique().scalars().all()
        else:
            print("❌ Specify either --email or --role to delete accounts.")
            return

        if not accounts:
            print("⚠️  No matching accounts found.")
            return
        for account in accounts:
            await session.delete(account)
        await session.commit()
        print(f"🗑️  Deleted {len(accounts)} account(s)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Manage food delivery accounts")
    parser.add_argument("--seed", action="store_true", help="Seed demo accounts")
    parser.add_argument("--delete", action="store_true", help="Delete accounts")
    parser.add_argument("--email", type=str, help="Email of account to delete")
    parser.add_argument("--role", type=str, help="Role of accounts to delete (customer/rider/restaurant)")

    args = parser.parse_args()

    if args.seed:
        asyncio.run(seed_accounts())
    elif args.delete:
        asyncio.run(delete_accounts(email=args.email, role=args.role))
    else:
        print("❗ Usage:")
        print("  python -m scripts.manage_users --seed")
        print("  python -m scripts.manage_users --delete --email rider@example.com")
        print("  python -m scripts.manage_users --delete --role rider")
