"""
Live streaming domain logic.

Includes:
- participant: Participant and room metadata stored on LiveKit.
- stage: Stage permission state machine.
- stream: Stream, ingress and stage operations.
"""
