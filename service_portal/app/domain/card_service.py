"""
Card lifecycle operations.
"""

from typing import Any, Dict, List

from ..adapters.gnosispay_client import GnosisPayClient


class GnosisPayCardService:
    """Thin domain layer over the card endpoints; every transition is owned upstream."""

    def __init__(self, client: GnosisPayClient):
        self.client = client

    async def get_cards(self, token: str) -> List[Dict[str, Any]]:
        return await self.client.get_cards(token)

    async def get_card_by_id(self, token: str, card_id: str) -> Dict[str, Any]:
        return await self.client.get_card_by_id(token, card_id)

    async def create_virtual_card(self, token: str) -> Dict[str, Any]:
        return await self.client.create_virtual_card(token)

    async def activate_card(self, token: str, card_id: str) -> None:
        await self.client.activate_card(token, card_id)

    async def freeze_card(self, token: str, card_id: str) -> None:
        """Temporary block; reversible with unfreeze."""
        await self.client.freeze_card(token, card_id)

    async def unfreeze_card(self, token: str, card_id: str) -> None:
        await self.client.unfreeze_card(token, card_id)

    async def report_card_lost(self, token: str, card_id: str) -> None:
        """Permanent block."""
        await self.client.report_card_lost(token, card_id)

    async def report_card_stolen(self, token: str, card_id: str) -> None:
        """Permanent block; a replacement is issued upstream."""
        await self.client.report_card_stolen(token, card_id)

    async def void_card(self, token: str, card_id: str) -> None:
        """Void a virtual card. Cannot be undone."""
        await self.client.void_card(token, card_id)

    async def get_card_status(self, token: str, card_id: str) -> Any:
        return await self.client.get_card_status(token, card_id)

    async def get_card_transactions(self, token: str, card_id: str) -> Any:
        return await self.client.get_card_transactions(token, card_tokens=[card_id])
