"""local/ -- In-process simulation of the SAFECORD HTTP service.

Layer rule: local/ imports from core/, store/, auth/ and contract/ only.
It does NOT import from api/ (no FastAPI at runtime), client/, or console/.
"""
