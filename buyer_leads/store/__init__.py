"""In-memory stores for buyer leads."""

from buyer_leads.store.buyers import BuyerPage, BuyersQuery, BuyerStore

__all__ = ["BuyerPage", "BuyerStore", "BuyersQuery"]
