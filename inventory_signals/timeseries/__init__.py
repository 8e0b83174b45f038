"""Time-bucketed revenue aggregation and trend annotation."""
