"""
Frozen pydantic models for the inventory domain.

Modules:
  product       - Product, Transaction.
  notification  - Notification and the tagged action union.
  pricing       - PriceRecommendation.
  series        - RevenuePoint, TrendNote.
  insight       - Insight, InvoiceLine, ChatReply (collaborator payloads).
"""
