"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (CSV header, suffixes, MIME types)
- exceptions: Conversion exception hierarchy
- ingress: Azure Functions transport helpers
"""
