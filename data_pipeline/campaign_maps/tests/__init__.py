"""
Campaign Maps Module Test Suite

Unit tests for parsing, medal classification, the live-services client,
job logging, data quality checks and the season collector.

Run all tests:
    python -m unittest discover data_pipeline.campaign_maps.tests

Run specific test module:
    python -m unittest data_pipeline.campaign_maps.tests.test_collector
"""
