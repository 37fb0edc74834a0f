"""console/ -- Operator console: the admin command interpreter and its event sinks.

Layer rule: console/ imports from core/, contract/ and client/ only. It talks to a
backend exclusively through BackendClient, never to services or stores.
"""
