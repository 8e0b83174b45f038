"""
Alert derivation.

Modules:
  notifications - capped, de-duplicated notification bell.
  feeds         - alert-center stock warnings and market opportunities.
"""
