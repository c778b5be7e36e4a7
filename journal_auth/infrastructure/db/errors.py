"""Errores de ciclo de vida del pool PostgreSQL (no de queries)."""


class DatabasePoolError(Exception):
    """Base: el pool no está en el estado que la operación necesita."""


class PoolAlreadyInitializedError(DatabasePoolError):
    pass


class PoolNotInitializedError(DatabasePoolError):
    pass
