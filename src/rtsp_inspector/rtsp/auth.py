"""RTSP Basic and Digest authentication (RFC 2617 style, as used by RTSP/1.0).

A Sender is built from the server's WWW-Authenticate challenge(s) and the
credentials embedded in the URL, then signs every subsequent request.
"""

from __future__ import annotations

import base64
import hashlib
import re
import secrets
from dataclasses import dataclass, field

from rtsp_inspector.rtsp.errors import RTSPAuthError

# key=value or key="quoted value" pairs inside a challenge
_PARAM_RE = re.compile(r'(\w+)\s*=\s*(?:"((?:[^"\\]|\\.)*)"|([^\s,]+))')


@dataclass(frozen=True)
class Challenge:
    """One parsed WWW-Authenticate challenge."""

    scheme: str  # "basic" or "digest"
    params: dict[str, str] = field(default_factory=dict)

    @property
    def realm(self) -> str:
        return self.params.get("realm", "")


def parse_challenge(value: str) -> Challenge:
    """Parse a WWW-Authenticate header value.

    Raises:
        RTSPAuthError: If the value has no scheme.
    """
    value = value.strip()
    if not value:
        raise RTSPAuthError("empty WWW-Authenticate header")
    scheme, _, rest = value.partition(" ")
    params = {
        match.group(1).casefold(): (
            match.group(2) if match.group(2) is not None else match.group(3)
        )
        for match in _PARAM_RE.finditer(rest)
    }
    return Challenge(scheme=scheme.casefold(), params=params)


def _md5_hex(value: str) -> str:
    return hashlib.md5(value.encode("utf-8"), usedforsecurity=False).hexdigest()


class Sender:
    """Signs requests with credentials according to a server challenge."""

    def __init__(self, challenges: list[str], username: str, password: str) -> None:
        """Pick the strongest supported challenge.

        Args:
            challenges: Raw WWW-Authenticate header values.
            username: User name from the URL.
            password: Password from the URL.

        Raises:
            RTSPAuthError: If no challenge uses a supported scheme.
        """
        parsed = [parse_challenge(value) for value in challenges if value.strip()]
        digest = next((c for c in parsed if c.scheme == "digest"), None)
        basic = next((c for c in parsed if c.scheme == "basic"), None)
        chosen = digest or basic
        if chosen is None:
            schemes = ", ".join(sorted({c.scheme for c in parsed})) or "none"
            raise RTSPAuthError(f"no supported authentication scheme (got {schemes})")
        if chosen.scheme == "digest" and "nonce" not in chosen.params:
            raise RTSPAuthError("digest challenge without nonce")

        self.challenge = chosen
        self._username = username
        self._password = password
        self._nonce_count = 0

    def authorization(self, method: str, uri: str) -> str:
        """Build the Authorization header value for one request."""
        if self.challenge.scheme == "basic":
            token = base64.b64encode(
                f"{self._username}:{self._password}".encode()
            ).decode("ascii")
            return f"Basic {token}"
        return self._digest(method, uri)

    def _digest(self, method: str, uri: str) -> str:
        params = self.challenge.params
        realm = params.get("realm", "")
        nonce = params["nonce"]
        algorithm = params.get("algorithm", "MD5")
        if algorithm.upper() not in ("MD5", "MD5-SESS"):
            raise RTSPAuthError(f"unsupported digest algorithm: {algorithm}")

        ha1 = _md5_hex(f"{self._username}:{realm}:{self._password}")
        ha2 = _md5_hex(f"{method}:{uri}")

        qop_options = [q.strip() for q in params.get("qop", "").split(",") if q.strip()]
        cnonce = secrets.token_hex(8)
        if algorithm.upper() == "MD5-SESS":
            ha1 = _md5_hex(f"{ha1}:{nonce}:{cnonce}")

        fields = [
            f'username="{self._username}"',
            f'realm="{realm}"',
            f'nonce="{nonce}"',
            f'uri="{uri}"',
        ]
        if "auth" in qop_options:
            self._nonce_count += 1
            nc = f"{self._nonce_count:08x}"
            response = _md5_hex(f"{ha1}:{nonce}:{nc}:{cnonce}:auth:{ha2}")
            fields.extend(["qop=auth", f"nc={nc}", f'cnonce="{cnonce}"'])
        else:
            response = _md5_hex(f"{ha1}:{nonce}:{ha2}")
        fields.append(f'response="{response}"')
        if "opaque" in params:
            fields.append(f'opaque="{params["opaque"]}"')
        if "algorithm" in params:
            fields.append(f"algorithm={algorithm}")
        return "Digest " + ", ".join(fields)
