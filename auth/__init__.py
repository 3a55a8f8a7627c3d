"""
Authentication for the Ubisoft / Nadeo live services.
"""
