"""
Inventory Signals - CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Build a fresh in-memory session from the seed catalogue
     (plus an optional ``--sales`` CSV).
  4. Derive the requested signals.
  5. Report result to stdout.

Install and run::

    pip install -e .
    inventory-signals --help
    inventory-signals validate-config
    inventory-signals show-inventory --sales data/sales.csv
    inventory-signals report-alerts
    inventory-signals report-pricing --candidate 2=120 --candidate 4=40
    inventory-signals report-revenue --product 1 --granularity weekly
    inventory-signals export-notifications --format json --out data/exports/notifications.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="inventory-signals",
    help="Inventory Signals - stock alerts, price recommendations and revenue trends.",
    add_completion=False,
)

_CONFIG_HELP = "Path to TOML config file (default: config/default.toml)."
_SALES_HELP = "Optional sales or inventory CSV to import into the session."


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from inventory_signals.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from inventory_signals.utils.logging import configure_logging
    configure_logging(config.logging)


def _build_session_or_exit(config, sales_path: Optional[str] = None):
    """Seed a session from config, optionally importing a CSV on top."""
    from inventory_signals.config import resolve_project_path
    from inventory_signals.ingestion.csv_import import CsvImportError
    from inventory_signals.ingestion.seed_loader import load_seed_products
    from inventory_signals.store.entity_store import EntityStore
    from inventory_signals.store.session import InventorySession

    try:
        products = load_seed_products(resolve_project_path(config.data.seed_file))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)

    session = InventorySession(EntityStore(products), config)

    if sales_path:
        try:
            result = session.import_csv(Path(sales_path))
        except FileNotFoundError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)
        except CsvImportError as exc:
            typer.echo(f"[ERROR] CSV import failed ({exc.code}): {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(
            f"  Imported {result.layout} CSV: {len(result.products)} product(s), "
            f"{len(result.transactions)} transaction(s), {len(result.errors)} row(s) skipped."
        )
    return session


def _parse_candidates_or_exit(pairs: list[str]) -> dict[str, str]:
    candidates: dict[str, str] = {}
    for pair in pairs:
        product_id, sep, price = pair.partition("=")
        if not sep or not product_id.strip():
            typer.echo(f"[ERROR] --candidate must look like ID=PRICE, got '{pair}'.", err=True)
            raise typer.Exit(code=1)
        candidates[product_id.strip()] = price
    return candidates


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Seed catalogue:     {config.data.seed_file}")
    typer.echo(f"  Export dir:         {config.data.export_dir}")
    typer.echo(f"  Notification cap:   {config.notifications.cap}")
    typer.echo(f"  Trend threshold:    {config.trends.change_threshold:.0%}")
    typer.echo(f"  Default granularity:{config.trends.default_granularity.value}")
    typer.echo(f"  Insights endpoint:  {config.insights.endpoint or '(rule-based only)'}")
    typer.echo(f"  Language:           {config.insights.language}")
    typer.echo(f"  Log level:          {config.logging.level}")
    typer.echo(f"  Debug mode:         {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config is valid.")


@app.command("show-inventory")
def show_inventory(
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print the catalogue with stock tiers and the KPI summary."""
    from inventory_signals.reporting.formatters import format_inventory_table, format_kpi_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, sales_path)

    typer.echo(format_kpi_summary(session.summary()))
    typer.echo(format_inventory_table(session.store.products))


@app.command("report-alerts")
def report_alerts(
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print the notification bell and both alert-center feeds."""
    from inventory_signals.reporting.formatters import format_alert_center, format_notifications

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, sales_path)

    typer.echo(format_notifications(session.notifications))
    typer.echo(format_alert_center(session.alert_center))


@app.command("report-pricing")
def report_pricing(
    candidates: list[str] = typer.Option(
        [],
        "--candidate",
        help="Candidate price to evaluate, as ID=PRICE. Repeatable.",
    ),
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Evaluate price recommendations for every product.

    Products without a ``--candidate`` are evaluated at their current price.
    """
    from inventory_signals.pricing.engine import suggested_price
    from inventory_signals.reporting.formatters import format_pricing_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, sales_path)
    editor = session.prices

    for product_id, price in _parse_candidates_or_exit(candidates).items():
        try:
            editor.set_candidate(product_id, price)
        except KeyError:
            typer.echo(f"[ERROR] Unknown product id '{product_id}'.", err=True)
            raise typer.Exit(code=1)
        except ValueError as exc:
            typer.echo(f"[ERROR] {exc}", err=True)
            raise typer.Exit(code=1)

    rows = []
    for product in session.store.products:
        rec = editor.recommendation_for(product.id)
        rows.append(
            (product, editor.candidate_for(product.id), rec, suggested_price(product, rec))
        )
    typer.echo(format_pricing_table(rows))


@app.command("report-revenue")
def report_revenue(
    product_id: Optional[str] = typer.Option(
        None,
        "--product",
        help="Product id to chart. Omit for shop-wide revenue.",
    ),
    granularity: Optional[str] = typer.Option(
        None,
        "--granularity",
        help="daily | weekly | monthly | yearly (default from config).",
    ),
    csv_out: Optional[str] = typer.Option(
        None,
        "--csv",
        help="Also write the series to this CSV path.",
    ),
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print a bucketed revenue series with its trend note."""
    from inventory_signals.reporting.export import export_to_csv, flatten_revenue_series_for_export
    from inventory_signals.reporting.formatters import format_revenue_series
    from inventory_signals.taxonomy.signal_taxonomy import Granularity

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        gran = Granularity(granularity) if granularity else config.trends.default_granularity
    except ValueError:
        valid = ", ".join(g.value for g in Granularity)
        typer.echo(f"[ERROR] Invalid granularity '{granularity}'. Valid: {valid}", err=True)
        raise typer.Exit(code=1)

    session = _build_session_or_exit(config, sales_path)

    if product_id:
        points = session.revenue_series(product_id, gran)
        title = f"{session.store.product_name(product_id)} ({gran.value})"
    else:
        points = session.shop_revenue_series(gran)
        title = f"all products ({gran.value})"

    typer.echo(format_revenue_series(points, title, session.trend(points)))

    if csv_out:
        rows = flatten_revenue_series_for_export(
            points,
            product_id or "",
            session.store.product_name(product_id) if product_id else "",
        )
        written = export_to_csv(rows, Path(csv_out))
        typer.echo(f"[OK] Wrote {len(rows)} row(s) to {written}")


@app.command("report-insights")
def report_insights(
    target_id: Optional[str] = typer.Option(
        None,
        "--target",
        help="Focus the inventory card on this product id.",
    ),
    use_ai: bool = typer.Option(
        False,
        "--ai",
        help="Ask the configured insights endpoint instead of the local rules.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print insights as JSON."),
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Print insight cards (rule-based by default)."""
    from inventory_signals.insights.client import HttpInsightClient
    from inventory_signals.reporting.export import insights_to_json, insights_to_text

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, sales_path)

    generator = None
    if use_ai:
        if not config.insights.endpoint:
            typer.echo("[ERROR] --ai requires [insights] endpoint in config.", err=True)
            raise typer.Exit(code=1)
        generator = HttpInsightClient.from_config(config.insights)

    insights = session.refresh_insights(generator, target_id=target_id)
    typer.echo(insights_to_json(insights) if as_json else insights_to_text(insights))


@app.command("ask")
def ask(
    question: str = typer.Argument(..., help="Question about your inventory."),
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Answer an inventory question, locally when possible."""
    from inventory_signals.insights.assistant import answer
    from inventory_signals.insights.client import HttpInsightClient

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, sales_path)

    generator = None
    if config.insights.endpoint:
        generator = HttpInsightClient.from_config(config.insights)

    reply = answer(session.store.products, question, generator, config.insights.language)
    typer.echo(reply.text)
    if reply.suggestions:
        typer.echo("  Suggestions: " + " | ".join(reply.suggestions))


@app.command("export-notifications")
def export_notifications(
    fmt: str = typer.Option("json", "--format", help="json | text"),
    out: Optional[str] = typer.Option(
        None,
        "--out",
        help="Output path (default: <export_dir>/notifications.<ext>).",
    ),
    sales_path: Optional[str] = typer.Option(None, "--sales", help=_SALES_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Write the current notification list to a file."""
    from inventory_signals.config import resolve_project_path
    from inventory_signals.reporting.export import (
        export_text,
        export_to_json,
        notifications_to_json,
        notifications_to_text,
    )

    if fmt not in ("json", "text"):
        typer.echo(f"[ERROR] --format must be 'json' or 'text', got '{fmt}'.", err=True)
        raise typer.Exit(code=1)

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    session = _build_session_or_exit(config, sales_path)
    notifications = session.notifications

    ext = "json" if fmt == "json" else "txt"
    target = Path(out) if out else (
        resolve_project_path(config.data.export_dir) / f"notifications.{ext}"
    )
    if fmt == "json":
        written = export_to_json(notifications_to_json(notifications), target)
    else:
        written = export_text(notifications_to_text(notifications), target)

    typer.echo(f"[OK] Wrote {len(notifications)} notification(s) to {written}")


if __name__ == "__main__":
    app()
