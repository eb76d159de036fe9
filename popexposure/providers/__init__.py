"""Data providers for the exposure pipeline.

The input-output model, the spatial emissions/concentration model and the
population data are external services. The engine only sees them through
the abstract interfaces in ``base``.
"""
