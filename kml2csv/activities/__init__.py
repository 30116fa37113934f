"""Conversion stages.

Each stage is a plain function composed by the orchestrator:
read_source → parse_kml → extract_geometry → encode_csv.
"""
