"""StrEnum taxonomies shared across the engine (demand, stock tier, granularity, ...)."""
