"""Authentication module (single shared password).

Endpoints:
    POST /login - Exchange the password for a session cookie

Services:
    - AuthGate: cookie and password checks against the configured secret.
"""
