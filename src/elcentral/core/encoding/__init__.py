"""Payload encoders for the scrape endpoints."""
