"""
HATETRIS - an adversarial falling-block puzzle engine.

Instead of dealing pieces at random, the engine searches every position the
player could reach with each piece type and deals the one whose best
placement is worst for the player. Provides:
- The well/piece transition engine
- Reachability search and piece selectors
- A branching undo/redo/replay timeline
- The hex replay codec
"""

__version__ = "0.1.0"
