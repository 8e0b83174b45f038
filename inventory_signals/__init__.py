"""Inventory Signals: stock classification, alerts, price recommendations and revenue trends."""
