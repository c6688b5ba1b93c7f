"""Inventory KPI aggregation shared by the summary endpoint, chat and client store"""
from collections import Counter
from typing import Iterable

from asset_inventory.application.dto.asset_dto import InventorySummaryDTO
from asset_inventory.domain.entities.asset import DEFAULT_ASSIGNEE


def summarize_assets(assets: Iterable) -> InventorySummaryDTO:
    """Aggregate anything exposing status, category, value and assigned_to"""
    assets = list(assets)
    by_status = Counter(asset.status for asset in assets)
    by_category = Counter(asset.category for asset in assets)
    assignees = {asset.assigned_to or DEFAULT_ASSIGNEE for asset in assets}
    return InventorySummaryDTO(
        total_assets=len(assets),
        total_value=round(sum(asset.value or 0.0 for asset in assets), 2),
        assignees=len(assignees),
        by_status=dict(by_status),
        by_category=dict(by_category),
    )
