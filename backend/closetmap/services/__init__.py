"""Services Layer — imperative shell: sequences store and collaborator IO around core rules.

Invariants:
    - Every service method takes the caller's owner_id and scopes all queries by it
    - Services raise ClosetMapError subclasses; routes never translate errors
"""
