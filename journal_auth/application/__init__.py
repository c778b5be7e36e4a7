"""Casos de uso de autenticación y mantenimiento de passwords."""
