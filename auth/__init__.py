"""auth/ -- Accounts, password hashing, session tokens and the session gate for AgriRent.

Layer rule: auth/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/. api/ imports from auth/, not the other way around.
"""
