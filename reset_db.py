import asyncio
import logging
from decimal import Decimal

from crm.core.database import AsyncSessionLocal, engine
from crm.models import Base, Company, Package

logger = logging.getLogger("reset_db")

COMPANIES = [
    {
        "name": "Aarti Infra",
        "code": "AARTI",
        "address": "123 Construction Street, City",
        "phone": "+91 9876543210",
        "gst_number": "27AABCU9603R1ZM",
    },
    {
        "name": "Interior & Turnkey Firm",
        "code": "INTERIOR",
        "address": "456 Design Avenue, City",
        "phone": "+91 9876543211",
        "gst_number": "27AABCU9603R1ZN",
    },
]

TIERS = ["Silver", "Gold", "Platinum"]
BHK_TYPES = ["1 BHK", "2 BHK", "3 BHK", "4 BHK"]
BASE_RATES = {"Silver": Decimal("1200"), "Gold": Decimal("1500"), "Platinum": Decimal("2000")}

# Interior packages are priced at 80% of the construction ones
INTERIOR_FACTOR = Decimal("0.8")


def default_packages(company: Company) -> list[Package]:
    interior = company.code == "INTERIOR"
    packages = []
    for tier in TIERS:
        for bhk in BHK_TYPES:
            rate = BASE_RATES[tier] * INTERIOR_FACTOR if interior else BASE_RATES[tier]
            kind = "interior" if interior else "construction"
            packages.append(
                Package(
                    company_id=company.id,
                    name=f"{bhk} {tier} {'Interior' if interior else 'Package'}",
                    bhk_type=bhk,
                    tier=tier,
                    base_rate_sqft=rate,
                    description=f"Complete {bhk} {kind} package with {tier.lower()} finishes",
                )
            )
    return packages


async def reset():
    logger.info("Connecting to the database, dropping tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Tables dropped. Creating tables...")
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as session:
        companies = [Company(**data) for data in COMPANIES]
        session.add_all(companies)
        await session.flush()
        for company in companies:
            session.add_all(default_packages(company))
        await session.commit()

    logger.info("Database reset: %s companies, %s packages each", len(COMPANIES), len(TIERS) * len(BHK_TYPES))
    await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    asyncio.run(reset())
