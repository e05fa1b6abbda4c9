"""
Realtime chat app.

This app contains:
- A Channels consumer for `/ws` that binds each socket to the signed-in user
- An in-memory session registry and a best-effort broadcast relay
- A presence endpoint listing who is currently connected to this instance
"""
