"""KML to CSV converter.

Reads KML documents (or KML packaged inside KMZ archives), flattens
point, line, polygon and multi-geometry placemarks into a single row
schema, and writes the result as CSV for spreadsheets and GIS tools.
"""

__version__ = "0.1.0"
