"""
Ashram Connect backend
"""
