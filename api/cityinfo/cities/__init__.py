"""
Cities: listing, pagination and single-city lookups.
"""
