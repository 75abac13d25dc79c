# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed bearer tokens (JWT) and signing-key helpers."""

from __future__ import annotations

import base64
import binascii
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from authapi.domain.sessions.entities import TokenClaims, TokenKind
from authapi.shared.logging import logger

_PEM_PREFIX = "-----BEGIN"


def load_pem(value: str) -> str:
    """Accept a PEM document either verbatim or base64-encoded."""
    stripped = value.strip()
    if stripped.startswith(_PEM_PREFIX):
        return stripped
    try:
        decoded = base64.b64decode(stripped, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise ValueError("signing key is neither PEM nor base64-encoded PEM") from exc
    if not decoded.strip().startswith(_PEM_PREFIX):
        raise ValueError("decoded signing key is not a PEM document")
    return decoded


def generate_rsa_key_pair(key_size: int = 2048) -> tuple[str, str]:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")
    return private_pem, public_pem


class JwtTokenCodec:
    """Signs and verifies tokens of one kind with one asymmetric key pair."""

    def __init__(
        self,
        *,
        kind: TokenKind,
        private_key: str,
        public_key: str,
        algorithm: str = "RS256",
    ) -> None:
        self._kind = kind
        self._private_key = load_pem(private_key)
        self._public_key = load_pem(public_key)
        self._algorithm = algorithm

    def encode(self, subject: str, *, issued_at: datetime, ttl: timedelta) -> str:
        payload = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(payload, self._private_key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims | None:
        """Return the verified claims, or None for a bad signature or an expired token."""
        try:
            payload = jwt.decode(
                token,
                self._public_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug(f"token.{self._kind}: expired")
            return None
        except jwt.InvalidTokenError as exc:
            logger.debug(f"token.{self._kind}: rejected ({type(exc).__name__})")
            return None

        return TokenClaims(
            subject=str(payload["sub"]),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )


__all__ = ["JwtTokenCodec", "generate_rsa_key_pair", "load_pem"]
