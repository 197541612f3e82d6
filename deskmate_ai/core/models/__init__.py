"""Shared models; ``io`` holds the HTTP request and response schemas."""
