"""
Service layer for groupfit
"""
