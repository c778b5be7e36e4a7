"""Adaptadores de infraestructura: row stores, pool DB, notificaciones."""
