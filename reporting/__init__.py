"""Document reporting and classification engine.

Turns snapshots of document and notification records into lifecycle
classifications, report statistics, chart series and spreadsheet sheets.
"""
