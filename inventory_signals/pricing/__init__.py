"""
Price recommendation engine: turns (baseline, candidate, stock, demand)
into a warn / suggest / maintain decision with a rationale.

Modules
-------
engine : recommend() decision tree, suggested_price(), half-up rounding.
editor : PriceEditSession - unsaved candidates and the two commit paths.
"""
