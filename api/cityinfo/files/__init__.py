"""
PDF upload and file download endpoints.
"""
