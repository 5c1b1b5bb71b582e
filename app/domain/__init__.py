"""
Domain layer containing core business logic and domain services.

Submodules:
- auth: Session credentials for follow-up requests.
- live: Live streaming domain logic (streams, ingress, stage).
- utils: Domain-specific utilities (e.g., room name generation).
"""
