"""
===============================================================================
TARJETA CRC — identity/credential_hasher.py
===============================================================================

Módulo:
    Derivación y verificación de passwords (SHA-256 determinístico)

Responsabilidades:
    - Hashear texto con SHA-256 (hex minúscula, 64 chars).
    - Derivar el password "regular" de un usuario: hash(local_part(email) + employee_id).
    - Verificar un password tipeado contra el hash guardado o el derivado.
    - Reconocer el password temporal de bootstrap.
    - Exponer verify_hash() SOLO para uso interno (digest ya calculado).

Colaboradores:
    - crosscutting.config.Settings: bootstrap_password.
    - identity.credential_store / application.auth_service: consumidores.
    - application.password_maintenance: usa derive_password.
    - application.auth_service.password_status: usa verify_hash para saber si
      el hash guardado sigue siendo el derivado.

Decisiones de diseño:
    - Sin salt y determinístico: los hashes existentes deben seguir verificando.
    - verify() SIEMPRE hashea el candidato. Un candidato de 64 chars hex se
      trata como password tipeado; nunca como digest.
    - Comparaciones con hmac.compare_digest.
===============================================================================
"""

from __future__ import annotations

import hashlib
import hmac
import re

_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$", re.IGNORECASE)


def local_part_of(email: str) -> str:
    """Texto antes del primer '@'. Sin '@' se usa el email completo."""
    local, _, _ = (email or "").partition("@")
    return local


def is_digest(text: str | None) -> bool:
    """True si el texto tiene forma de digest SHA-256 (64 hex)."""
    return bool(text) and bool(_DIGEST_RE.match(text or ""))


class CredentialHasher:
    """Hash y verificación de credenciales."""

    def __init__(self, bootstrap_password: str):
        self._bootstrap_password = bootstrap_password
        self._bootstrap_hash = self.hash(bootstrap_password)

    @staticmethod
    def hash(text: str) -> str:
        return hashlib.sha256((text or "").encode("utf-8")).hexdigest()

    @property
    def bootstrap_hash(self) -> str:
        return self._bootstrap_hash

    def derive_password(self, email: str, employee_id: str) -> str:
        return self.hash(local_part_of(email) + str(employee_id or ""))

    def is_bootstrap_hash(self, stored_hash: str | None) -> bool:
        return _equals((stored_hash or "").lower(), self._bootstrap_hash)

    def verify(
        self,
        candidate: str,
        email: str,
        employee_id: str,
        *,
        stored_hash: str | None = None,
        allow_temporary: bool = True,
    ) -> bool:
        """
        Verifica un password tipeado.

        - Bootstrap: si el candidato es el password temporal y el hash guardado
          es hash(bootstrap), acepta. Si no, sigue por el camino normal.
        - Normal: hash(candidato) == stored_hash (o el derivado si no hay guardado).
        """
        if candidate is None or candidate == "":
            return False

        if (
            allow_temporary
            and candidate == self._bootstrap_password
            and self.is_bootstrap_hash(stored_hash)
        ):
            return True

        expected = self._expected(email, employee_id, stored_hash)
        return _equals(self.hash(candidate), expected)

    def verify_hash(
        self,
        digest: str,
        email: str,
        employee_id: str,
        *,
        stored_hash: str | None = None,
    ) -> bool:
        """
        Compara un digest ya calculado contra el esperado.

        Uso interno (mantenimiento). Ningún flujo de login llega acá.
        """
        if not is_digest(digest):
            return False
        expected = self._expected(email, employee_id, stored_hash)
        return _equals(digest.lower(), expected)

    def _expected(self, email: str, employee_id: str, stored_hash: str | None) -> str:
        if stored_hash:
            return stored_hash.lower()
        return self.derive_password(email, employee_id)


def _equals(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
