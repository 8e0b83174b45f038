"""
inventory_signals.reporting - CLI formatting and snapshot export.

Modules:
  formatters - ASCII terminal table formatters for Typer CLI commands.
  export     - JSON / text / CSV export helpers.
"""
