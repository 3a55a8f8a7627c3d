"""
Authentication Test Suite

Run all tests:
    python -m unittest discover auth.tests
"""
