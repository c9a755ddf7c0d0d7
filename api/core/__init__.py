"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB wiring,
logging setup, HTTP error rendering). Keep feature-specific SQL and business
logic in the corresponding feature package (e.g. `cashcards/`).
"""
