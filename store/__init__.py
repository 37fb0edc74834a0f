"""store/ -- Credential Store providers and the Directory Index for SAFECORD.

Layer rule: store/ imports only stdlib, third-party libraries and core/.
It does NOT import from api/, auth/, contract/, local/, client/, or console/.
"""
