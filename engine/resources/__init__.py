"""
Resource loading - NPC database and bundled schemas.
"""
