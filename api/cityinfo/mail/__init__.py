"""
Outgoing mail notifications.
"""
