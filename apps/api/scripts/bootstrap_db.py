"""Create database schema and seed sample listings for development."""
from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta, timezone

from sqlalchemy import delete

from shift_api.core.logging import setup_logging
from shift_api.db.session import SessionLocal, create_schema
from shift_api.models.blocked_date import BlockedDate
from shift_api.models.listing import Listing, ListingKind, ListingSource, ListingSyncStatus

TODAY = date.today()

LISTINGS = [
	{
		"id": "villa-casa-del-mar",
		"kind": ListingKind.VILLA,
		"title": "Casa del Mar",
		"location": "Miami",
		"price": 2_400,
		"source": ListingSource.MANUAL,
		"blocked": [TODAY + timedelta(days=offset) for offset in (3, 4, 5, 12)],
	},
	{
		"id": "villa-sunset-ridge",
		"kind": ListingKind.VILLA,
		"title": "Sunset Ridge Estate",
		"location": "Los Angeles",
		"price": 3_800,
		"source": ListingSource.API,
		"sync_status": ListingSyncStatus.OK,
		"blocked": [TODAY + timedelta(days=offset) for offset in (1, 2, 20)],
	},
	{
		"id": "car-huracan-evo",
		"kind": ListingKind.CAR,
		"title": "Lamborghini Huracan EVO",
		"location": "Miami",
		"price": 1_450,
		"source": ListingSource.MANUAL,
		"blocked": [TODAY + timedelta(days=7)],
	},
	{
		"id": "car-cullinan",
		"kind": ListingKind.CAR,
		"title": "Rolls-Royce Cullinan",
		"location": "Los Angeles",
		"price": 1_900,
		"source": ListingSource.API,
		"sync_status": ListingSyncStatus.STALE,
		"blocked": [],
	},
	{
		"id": "yacht-azimut-68",
		"kind": ListingKind.YACHT,
		"title": "Azimut 68 Flybridge",
		"location": "Miami",
		"price": 950,
		"source": ListingSource.MANUAL,
		"blocked": [TODAY + timedelta(days=offset) for offset in (6, 13)],
	},
]


async def seed_listings() -> None:
	"""Insert or update demo listings and their blocked dates."""

	async with SessionLocal() as session:
		async with session.begin():
			for data in LISTINGS:
				listing = await session.get(Listing, data["id"])
				if listing is None:
					listing = Listing(id=data["id"])
					session.add(listing)

				listing.kind = data["kind"]
				listing.title = data["title"]
				listing.location = data["location"]
				listing.price = data["price"]
				listing.source = data["source"]
				listing.read_only_calendar = data["source"] == ListingSource.API
				listing.sync_status = data.get("sync_status", ListingSyncStatus.NOT_APPLICABLE)
				if listing.sync_status != ListingSyncStatus.NOT_APPLICABLE:
					listing.last_synced_at = datetime.now(timezone.utc)
				listing.active = True

				await session.flush()
				await session.execute(delete(BlockedDate).where(BlockedDate.listing_id == data["id"]))
				for day in data["blocked"]:
					session.add(BlockedDate(listing_id=data["id"], day=day))


async def main() -> None:
	setup_logging()
	await create_schema()
	await seed_listings()
	print("Database schema ensured and demo listings seeded.")


if __name__ == "__main__":
	asyncio.run(main())
