"""
Gudang backend test suite.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_conversion_service.py -v
"""
