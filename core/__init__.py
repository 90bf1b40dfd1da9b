"""EverGrow core: pure progression, event and prestige rules (UI independent)."""

API_VERSION = "core-v1-evergrow"
