"""
CityInfo API: cities and their points of interest over FastAPI + asyncpg.
"""
