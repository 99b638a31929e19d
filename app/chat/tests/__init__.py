"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Thread, ThreadParticipant, Message model tests
- test_services.py: ChatService tests
- test_views.py: REST API endpoint tests
- test_realtime.py: ChatFanout and SessionRegistry tests
- test_consumers.py: WebSocket consumer tests
- test_middleware.py: WebSocket token authentication tests
- test_tasks.py: Celery task tests

Usage:
    pytest chat/tests/
    pytest chat/tests/test_consumers.py
"""
