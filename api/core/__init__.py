"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses (DB wiring,
settings, error taxonomy, pagination, the media host client). Keep
feature-specific SQL and business rules in the corresponding feature package
(e.g. `articles/`).
"""
