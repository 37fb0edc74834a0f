"""auth/ -- Identity and authorization services for SAFECORD.

Layer rule: auth/ imports only stdlib, third-party libraries, core/ and store/.
It does NOT import from api/, contract/, local/, client/, or console/.
api/ and local/ import from auth/, not the other way around.
"""
