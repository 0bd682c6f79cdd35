"""
Services layer - everything the screens call that is not screen state.

DESIGN PRINCIPLE:
- Services talk to the outside world (REST, socket.io, translation) or
  render documents (map, speech page); they hold no per-screen state
- Screens own state and decide how failures are surfaced to the user
"""
