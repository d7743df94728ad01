"""
Points of interest nested under a city.
"""
