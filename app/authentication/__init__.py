"""
Authentication application.

Identity comes from Firebase: clients sign in there and send the ID token
with every request. This app verifies the token and maps it to a local
User record.

Key components:
    - User model: one row per Firebase account, keyed by firebase_uid
    - firebase: token verification (FirebasePrincipal)
    - FirebaseAuthentication: DRF authentication class
    - PrincipalService: principal -> User resolution and syncing

Usage:
    from authentication.models import User
    from authentication.services import PrincipalService
"""
