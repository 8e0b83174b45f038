"""
Insight cards and inventory Q&A.

Modules
-------
client    : InsightTextGenerator protocol, HttpInsightClient (httpx),
            get_insights() with single-fallback failure handling.
rules     : Rule-based Inventory Optimization / Pricing Comparison cards.
assistant : Local stock-query answers, AI fallback for everything else.
"""
