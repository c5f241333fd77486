"""Game services: rooms, battles, broadcasting and song lookup.

Pure(ish) domain logic used by the socket handlers, keeping transport
concerns separated from core game mechanics.
"""
