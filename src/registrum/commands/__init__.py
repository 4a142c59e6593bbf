"""
Commands - CLI command implementations.

- query:  read-only registry lookups (get, exists, is-enabled)
- write:  orchestrated registry writes (create, update, enable, disable)
"""
