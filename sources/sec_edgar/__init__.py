"""
SEC EDGAR company facts (XBRL) source.

Fetches companyfacts documents and reduces them to one net income
figure per calendar year.
"""
