"""Identidad: hashing de credenciales, stores de usuario/token y gate de acceso."""
