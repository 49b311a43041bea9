"""HTTP layer: shared dependencies, the API router and its route modules."""
