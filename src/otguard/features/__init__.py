"""Feature packages for otguard.

Each feature follows the entities/ + services/ split:
- collections: collection registry and access rules
- permissions: role resolution and permission evaluation
- documents: snapshots, OT operations, redaction and filtering
- validation: JSON-Schema gate
- pipeline: request descriptors, orchestrator and backend hooks
"""
