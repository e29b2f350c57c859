"""HTTP framework adapters for the scrape endpoints."""
