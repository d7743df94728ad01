"""
Token issuance and bearer-token guards.
"""
