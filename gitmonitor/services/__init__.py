"""Service layer of the synchronization engine."""
