"""Synthetic buyer lead generators."""

from buyer_leads.generators.base import BaseGenerator
from buyer_leads.generators.buyer import BuyerLeadGenerator

__all__ = ["BaseGenerator", "BuyerLeadGenerator"]
