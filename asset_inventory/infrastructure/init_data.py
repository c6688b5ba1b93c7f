"""Initialize demo data for an empty inventory"""
import logging
from datetime import date

from asset_inventory.domain.entities.asset import AssetDraft
from asset_inventory.domain.repositories.asset_repository import AssetRepository

logger = logging.getLogger(__name__)


def _created(on: str, details: str = "Asset created") -> list:
    return [{"action": "Created", "date": on, "user": "Admin", "details": details}]


DEMO_ASSETS = [
    AssetDraft(
        name="16-inch MacBook Pro M3",
        category="Electronics",
        status="In Use",
        assigned_to="Jane Doe",
        purchase_date=date(2024, 1, 15),
        warranty_end_date=date(2026, 1, 15),
        value=2499.99,
        location="Floor 7, West Wing",
        history=_created("2024-01-15"),
    ),
    AssetDraft(
        name="Herman Miller Chair",
        category="Furniture",
        status="In Storage",
        purchase_date=date(2023, 11, 20),
        warranty_end_date=date(2028, 11, 20),
        value=899.99,
        location="Warehouse B",
        history=_created("2023-11-20"),
    ),
    AssetDraft(
        name='Dell Monitor 27"',
        category="Electronics",
        status="In Repair",
        assigned_to="John Smith",
        purchase_date=date(2023, 8, 10),
        warranty_end_date=date(2026, 8, 10),
        value=349.99,
        location="IT Department",
        history=_created("2023-08-10"),
    ),
    AssetDraft(
        name="Conference Table",
        category="Furniture",
        status="In Use",
        assigned_to="Meeting Room A",
        purchase_date=date(2023, 7, 12),
        warranty_end_date=date(2028, 7, 12),
        value=1299.99,
        location="Meeting Room A",
        history=_created("2023-07-12"),
    ),
    AssetDraft(
        name="Projector",
        category="Electronics",
        status="In Repair",
        assigned_to="Meeting Room B",
        purchase_date=date(2023, 10, 8),
        warranty_end_date=date(2026, 10, 8),
        value=699.99,
        location="Meeting Room B",
        history=_created("2023-10-08"),
    ),
    AssetDraft(
        name="Office Supplies Kit",
        category="Office Supplies",
        status="In Storage",
        purchase_date=date(2024, 1, 30),
        warranty_end_date=date(2025, 1, 30),
        value=89.99,
        location="Supply Closet",
        history=_created("2024-01-30", "Added to supply inventory"),
    ),
]


async def init_demo_assets(repository: AssetRepository) -> int:
    """Insert the demo assets if the inventory is empty. Returns how many were added."""
    existing = await repository.list_all()
    if existing:
        logger.info("Inventory already has %d assets, skipping demo data", len(existing))
        return 0

    for draft in DEMO_ASSETS:
        await repository.insert(draft)
    logger.info("Seeded %d demo assets", len(DEMO_ASSETS))
    return len(DEMO_ASSETS)
