"""Seed a development or staging database with realistic shipments.

Creates shipments across every status, each with a milestone history that
ends in its current status and credits a random set of users. Ledger
anchoring uses the fake adapter unless LEDGER_ADAPTER says otherwise.

Refuses to run when PROTEAN_ENV is ``production``.

Usage:
    PROTEAN_ENV=staging DATABASE_URL=postgresql://... python scripts/seed.py --count 50
"""

import argparse
import os
import random
import sys
import time
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

# Add src/ to path so we can import domain modules
sys.path.insert(0, "src")

_HISTORY = {
    "CREATED": ["CREATED"],
    "IN_TRANSIT": ["CREATED", "IN_TRANSIT"],
    "DELIVERED": ["CREATED", "IN_TRANSIT", "DELIVERED"],
    "CANCELLED": ["CREATED", "CANCELLED"],
}


def _users(fake: Faker, count: int) -> list[dict]:
    return [{"user_id": f"user-{uuid.uuid4().hex[:8]}", "wallet_address": "0x" + fake.sha1()} for _ in range(count)]


def _milestones(fake: Faker, status: str, users: list[dict]) -> list[dict]:
    timestamp = datetime.now(UTC) - timedelta(days=random.randint(3, 30))
    milestones = []
    for name in _HISTORY[status]:
        timestamp += timedelta(seconds=random.randint(3_600, 86_400))
        actor = random.choice(users)
        milestones.append(
            {
                "name": name,
                "timestamp": timestamp.isoformat(),
                "description": fake.sentence(),
                "user_id": actor["user_id"],
                "wallet_address": actor["wallet_address"],
            }
        )
    return milestones


def main():
    parser = argparse.ArgumentParser(description="Seed shipments for development and staging")
    parser.add_argument("--count", type=int, default=20, help="Number of shipments to create (default: 20)")
    parser.add_argument("--users", type=int, default=5, help="Number of distinct milestone actors (default: 5)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible data")
    args = parser.parse_args()

    if os.environ.get("PROTEAN_ENV", "development").lower() == "production":
        print("ABORT: Seeding is not allowed in production!")
        sys.exit(1)

    os.environ.setdefault("LEDGER_ADAPTER", "fake")

    fake = Faker()
    if args.seed is not None:
        Faker.seed(args.seed)
        random.seed(args.seed)

    from shipping.domain import shipping
    from shipping.shipment.creation import register_shipment

    shipping.init()

    users = _users(fake, args.users)
    statuses = list(_HISTORY)
    created = 0
    errors = 0
    start = time.monotonic()

    print(f"Seeding {args.count} shipments into '{os.environ.get('PROTEAN_ENV', 'development')}'...")
    with shipping.domain_context():
        enterprise_id = f"ent-{uuid.uuid4().hex[:8]}"
        logistics_id = f"log-{uuid.uuid4().hex[:8]}"
        for i in range(args.count):
            status = statuses[i % len(statuses)]
            try:
                register_shipment(
                    tracking_number=f"NAV-{fake.bothify('??????????').upper()}",
                    origin=f"{fake.city()}, {fake.country()}",
                    destination=f"{fake.city()}, {fake.country()}",
                    enterprise_id=enterprise_id,
                    logistics_id=logistics_id,
                    status=status,
                    milestones=_milestones(fake, status, users),
                    off_chain_metadata={
                        "weight_kg": round(random.uniform(1, 500), 1),
                        "temperature_c": round(random.uniform(-20, 25), 1),
                        "humidity_pct": random.randint(20, 90),
                    },
                )
                created += 1
            except Exception as e:
                errors += 1
                print(f"  [ERROR] Shipment {i + 1}: {e}")

    elapsed = time.monotonic() - start
    print(f"Done: {created} created, {errors} errors in {elapsed:.1f}s.")
    if errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
