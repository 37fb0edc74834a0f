"""client/ -- Backend-agnostic client for the SAFECORD contract.

UI and operator code depend on BackendClient only. Whether requests go over
HTTP to the persistent service or in-process to the local simulation is a
configuration choice (BACKEND_MODE), made once in client.factory.make_client().

Layer rule: client/ imports from core/, contract/ and local/. It does NOT
import from api/ -- the HTTP provider talks to the service over the wire.
"""
