"""
Stock and demand classification.

Modules
-------
classifier : Named stock thresholds, tiering, purchase-frequency ranking.
kpis       : InventorySummary for the dashboard KPI block.
"""
