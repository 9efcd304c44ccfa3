"""
API routers for groupfit
"""
