"""
NPC Dialogue Framework.

Provides the dialogue-specific layer built on top of the engine:
- Dialog (models, catalog, navigator, dispatcher)
- World (NPC definitions, roster, presenter interface)
- Systems (DialogueSystem facade)
"""
