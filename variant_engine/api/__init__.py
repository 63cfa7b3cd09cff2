"""
HTTP adapter routers
"""
