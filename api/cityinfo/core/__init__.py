"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that the feature packages share
(DB wiring, settings, logging, error responses, content negotiation).
City and point-of-interest SQL stays in `cities/`.
"""
