"""
Jobs Service Package
"""
