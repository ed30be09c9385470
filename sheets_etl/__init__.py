"""POS products and orders into spreadsheet sheets.

Fetches the product catalog and a day's orders from their REST APIs,
flattens the nested JSON into fixed-width rows, and rewrites one
worksheet per output schema.
"""

__version__ = "0.1.0"
