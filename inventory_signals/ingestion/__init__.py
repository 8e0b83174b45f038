"""
Ingestion layer - seed catalogue, CSV imports and invoice extraction.

Submodules:
  seed_loader - JSON seed catalogue -> Product list
  csv_import  - sales / inventory CSV parser with row-level error reporting
  invoice     - adapter for the invoice-extraction collaborator

Credential placement (.env, gitignored):
  INSIGHTS_API_KEY - bearer token for the AI collaborator (name configurable)
"""
