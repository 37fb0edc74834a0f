"""contract/ -- The request/response contract both SAFECORD backends honor.

Layer rule: contract/ imports only stdlib, pydantic, core/ and auth/.
It does NOT import from api/, local/, client/, or console/. api/ (FastAPI)
and local/ (in-process simulation) both import from here, which is what keeps
their responses field-for-field identical.
"""
