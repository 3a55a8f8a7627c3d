"""
Season Awards Test Suite

Run all tests:
    python -m unittest discover analytics.tests
"""
