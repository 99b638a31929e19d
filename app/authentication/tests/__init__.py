"""
Tests for authentication app.

This package contains test modules for:
- test_models.py: User model and manager tests
- test_firebase.py: Firebase token verification tests
- test_services.py: PrincipalService tests
- test_views.py: sync-user and profile endpoint tests

Usage:
    pytest authentication/tests/
    pytest authentication/tests/test_firebase.py
"""
