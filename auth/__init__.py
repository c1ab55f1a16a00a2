"""auth/ -- Credential storage, password hashing, session tokens, and the auth service.

Layer rule: auth/ imports only stdlib, third-party libraries, and core/.
It does NOT import from api/. api/ imports from auth/, not the other way around.
"""
