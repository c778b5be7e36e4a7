"""Adaptadores HTTP (FastAPI) del core de autenticación."""
