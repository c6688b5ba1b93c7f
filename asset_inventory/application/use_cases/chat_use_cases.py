"""Chat use cases: advisory answers over an asset snapshot"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence

from asset_inventory.application.dto.chat_dto import ChatAssetDTO, ChatRequestDTO, ChatResponseDTO
from asset_inventory.application.services.inventory_summary import summarize_assets
from asset_inventory.infrastructure.llm.client import GeminiClient, LLMError

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5
LIST_LIMIT = 10

FORMATTING_RULES = """FORMATTING INSTRUCTIONS:
1. Always format responses using Markdown
2. Use headers (# ## ###) to organize information
3. Use **bold** for asset names, IDs and key metrics
4. Use bullet points and numbered lists for structured data
5. Use tables when showing several assets with similar data
6. Use blockquotes (>) for warnings or recommendations

RESPONSE GUIDELINES:
1. Use ONLY the asset data above, it is the current live database
2. If an asset is not in the list, say it was not found
3. Reference actual asset IDs and names from the data
4. Keep a professional but friendly tone"""

HELP_TEXT = """## How I can help

- **Overview**: ask "how many assets do we have?"
- **Status**: ask about assets *in repair*, *in storage*, *active*...
- **Category**: ask about *Electronics*, *Furniture*...
- **Value**: ask "what is our inventory worth?"
- **Lookup**: mention an asset name or ID

*Answers are generated from the current asset list.*"""

OVERVIEW_WORDS = ("how many", "total", "overview", "summary", "all assets", "show all", "count")
VALUE_WORDS = ("value", "worth", "cost", "expensive", "price")


def _money(amount: float) -> str:
    return f"${amount:,.2f}"


def _asset_line(asset: ChatAssetDTO) -> str:
    return (
        f'- {asset.id}: "{asset.name}" | Category: {asset.category} | Status: {asset.status}'
        f" | Assigned: {asset.assigned_to or 'Unassigned'} | Value: {_money(asset.value)}"
        f" | Location: {asset.location or 'Not specified'} | Purchase: {asset.purchase_date or 'unknown'}"
    )


def _asset_table(assets: Sequence[ChatAssetDTO]) -> str:
    rows = ["| ID | Name | Category | Status | Value |", "| --- | --- | --- | --- | --- |"]
    for asset in assets[:LIST_LIMIT]:
        rows.append(
            f"| `{asset.id or '-'}` | **{asset.name}** | {asset.category} | {asset.status} | {_money(asset.value)} |"
        )
    if len(assets) > LIST_LIMIT:
        rows.append(f"\n*...and {len(assets) - LIST_LIMIT} more*")
    return "\n".join(rows)


def recent_assets(assets: Sequence[ChatAssetDTO], limit: int = RECENT_LIMIT) -> List[ChatAssetDTO]:
    """Most recent purchases first; assets without a date go last"""
    dated = [asset for asset in assets if asset.purchase_date]
    undated = [asset for asset in assets if not asset.purchase_date]
    dated.sort(key=lambda asset: asset.purchase_date, reverse=True)
    return (dated + undated)[:limit]


def build_prompt(message: str, assets: Sequence[ChatAssetDTO], now: Optional[datetime] = None) -> str:
    """System prompt with live statistics, the full list and the user's question"""
    now = now or datetime.now()
    summary = summarize_assets(assets)
    status_lines = "\n".join(f"- {status}: {count}" for status, count in summary.by_status.items())
    category_lines = "\n".join(f"- {category}: {count} assets" for category, count in summary.by_category.items())
    asset_lines = "\n".join(_asset_line(asset) for asset in assets)
    recent_lines = "\n".join(
        f'- {asset.id}: "{asset.name}" ({asset.category}, {asset.status}, purchased {asset.purchase_date})'
        for asset in recent_assets(assets)
    )

    return f"""You are an AI assistant for an Asset Management System. You help users manage, track, and get insights about their company assets.

CURRENT REAL-TIME ASSET DATABASE ({now:%Y-%m-%d %H:%M}):
- Total Assets: {summary.total_assets}
- Total Value: {_money(summary.total_value)}
{status_lines or "- No assets"}

ASSET CATEGORIES BREAKDOWN:
{category_lines or "- None"}

COMPLETE ASSET LIST:
{asset_lines or "- None"}

RECENT ASSETS (Last {RECENT_LIMIT} by purchase date):
{recent_lines or "- None"}

{FORMATTING_RULES}

User Question: {message}"""


class KeywordResponder:
    """Canned answers picked by keywords, used when no hosted model is available"""

    def respond(self, message: str, assets: Sequence[ChatAssetDTO]) -> str:
        text = message.lower()

        if not assets:
            return "## No assets found\n\nThe inventory is currently empty. Add an asset to get started."

        matches = [
            asset
            for asset in assets
            if (asset.id and asset.id.lower() in text) or (asset.name and asset.name.lower() in text)
        ]
        if matches:
            return self._describe(matches)

        for status in sorted({asset.status for asset in assets if asset.status}, key=len, reverse=True):
            if status.lower() in text:
                return self._listing(f"Assets with status {status}", [a for a in assets if a.status == status])

        for category in sorted({asset.category for asset in assets if asset.category}, key=len, reverse=True):
            if category.lower() in text:
                return self._listing(f"{category} assets", [a for a in assets if a.category == category])

        if any(word in text for word in VALUE_WORDS):
            return self._value(assets)

        if any(word in text for word in OVERVIEW_WORDS):
            return self._overview(assets)

        return HELP_TEXT

    def _describe(self, assets: Sequence[ChatAssetDTO]) -> str:
        sections = []
        for asset in assets[:LIST_LIMIT]:
            sections.append(
                f"### {asset.name}\n\n"
                f"- **ID**: `{asset.id or '-'}`\n"
                f"- **Category**: {asset.category}\n"
                f"- **Status**: {asset.status}\n"
                f"- **Assigned to**: {asset.assigned_to or 'Unassigned'}\n"
                f"- **Location**: {asset.location or 'Not specified'}\n"
                f"- **Value**: {_money(asset.value)}\n"
                f"- **Purchased**: {asset.purchase_date or 'unknown'}"
            )
        return "## 🔍 Asset details\n\n" + "\n\n".join(sections)

    def _listing(self, title: str, assets: Sequence[ChatAssetDTO]) -> str:
        total = sum(asset.value for asset in assets)
        return f"## {title}\n\n**{len(assets)}** assets, total value **{_money(total)}**\n\n{_asset_table(assets)}"

    def _value(self, assets: Sequence[ChatAssetDTO]) -> str:
        summary = summarize_assets(assets)
        top = sorted(assets, key=lambda asset: asset.value, reverse=True)[:RECENT_LIMIT]
        return (
            f"## 📈 Inventory value\n\nTotal value of **{summary.total_assets}** assets: "
            f"**{_money(summary.total_value)}**\n\n### Most valuable\n\n{_asset_table(top)}"
        )

    def _overview(self, assets: Sequence[ChatAssetDTO]) -> str:
        summary = summarize_assets(assets)
        statuses = "\n".join(f"- **{status}**: {count}" for status, count in summary.by_status.items())
        categories = "\n".join(f"- **{category}**: {count}" for category, count in summary.by_category.items())
        return (
            f"## 📊 Inventory overview\n\n"
            f"- **Total assets**: {summary.total_assets}\n"
            f"- **Total value**: {_money(summary.total_value)}\n"
            f"- **Assignees**: {summary.assignees}\n\n"
            f"### By status\n\n{statuses}\n\n### By category\n\n{categories}"
        )


class ChatUseCases:
    """Use cases for the advisory chat. Stateless, nothing is persisted."""

    def __init__(self, llm_client: Optional[GeminiClient] = None, responder: Optional[KeywordResponder] = None):
        self.llm_client = llm_client
        self.responder = responder or KeywordResponder()

    async def answer(self, request: ChatRequestDTO) -> ChatResponseDTO:
        """Answer with the hosted model when configured, else with canned text"""
        if self.llm_client is not None and self.llm_client.enabled:
            prompt = build_prompt(request.message, request.assets)
            try:
                text = await self.llm_client.generate(prompt)
                return ChatResponseDTO(response=text)
            except LLMError as e:
                logger.warning("Hosted model failed, using keyword responder: %s", e)

        return ChatResponseDTO(response=self.responder.respond(request.message, request.assets))
