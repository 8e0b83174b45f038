"""
In-memory state for one session.

Modules:
  entity_store - EntityStore: products, transactions, mutation events.
  session      - InventorySession: recomputes notifications and alert
                 feeds after every store mutation.
"""
