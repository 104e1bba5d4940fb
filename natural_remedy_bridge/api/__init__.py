"""
REST API for the remedy matching service.
"""
