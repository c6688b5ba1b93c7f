# Database
from asset_inventory.infrastructure.database.base import Base, get_db, get_engine, init_db
from asset_inventory.infrastructure.database.models import AssetModel

__all__ = ["Base", "get_db", "get_engine", "init_db", "AssetModel"]
