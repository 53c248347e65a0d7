"""
Core configuration, auth, tenancy and permissions
"""
