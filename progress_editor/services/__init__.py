"""
Service layer: persistence gateway, change notifier, dialog boundary and the
user-facing editor service that ties them to the table engine.
"""
