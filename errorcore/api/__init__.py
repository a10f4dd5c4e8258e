"""
API layer of the error core.

Holds the failure response schemas and the FastAPI adapter that renders
translated errors. The adapter is imported explicitly from
`errorcore.api.error_handlers` so that the schemas stay usable without it.
"""
