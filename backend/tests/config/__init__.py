"""
Test configuration package: pytest markers and shared test data.
"""
