"""Persisted GitHub token handling.

The token file is INI-style. ``configure_token`` only ever appends a new
``[github]`` section, so whatever the file held before survives; readers take
the last ``token`` entry under a ``[github]`` header. Keys in other sections
are ignored. Concurrent appends are not synchronised.
"""

from __future__ import annotations

import re
from pathlib import Path

from .env_auth import EnvironmentAuthManager
from .errors import ParameterError
from .logging import get_logger
from .ux import print_error
from .validation import validate_required

TOKEN_SECTION = "github"
TOKEN_KEY = "token"

_SECTION_LINE = re.compile(r"^\s*\[(?P<name>[^\]]+)\]\s*$")
_TOKEN_LINE = re.compile(rf"^\s*{TOKEN_KEY}\s*[=:]\s*(?P<value>\S+)\s*$")


class TokenStore:
    def __init__(self, path: str | Path, env_auth: EnvironmentAuthManager | None = None):
        self.path = Path(path).expanduser()
        self.env_auth = env_auth
        self.logger = get_logger()

    def _read_persisted(self) -> str | None:
        if not self.path.exists():
            return None
        token: str | None = None
        section: str | None = None
        with self.path.open("r", encoding="utf-8") as f:
            for line in f:
                header = _SECTION_LINE.match(line)
                if header:
                    section = header.group("name").strip()
                    continue
                if section != TOKEN_SECTION:
                    continue
                match = _TOKEN_LINE.match(line)
                if match:
                    token = match.group("value")
        return token

    def get_token(self) -> str | None:
        """Return the configured token, or None when unauthenticated."""
        token = self._read_persisted()
        if token:
            return token
        if self.env_auth is not None:
            return self.env_auth.get_github_token()
        self.logger.debug("No GitHub token configured", path=str(self.path))
        return None

    def configure_token(self, token: str) -> Path:
        validate_required(token=token)
        token = token.strip()
        if any(ch.isspace() for ch in token):
            error = ParameterError("token", "token must not contain whitespace")
            print_error(str(error))
            raise error
        self.path.parent.mkdir(parents=True, exist_ok=True)

        existed = self.path.exists()
        prefix = ""
        if existed:
            content = self.path.read_text(encoding="utf-8")
            if content and not content.endswith("\n"):
                prefix = "\n"

        with self.path.open("a", encoding="utf-8") as f:
            f.write(f"{prefix}[{TOKEN_SECTION}]\n{TOKEN_KEY} = {token}\n")
        if not existed:
            self.path.chmod(0o600)

        self.logger.log_operation(
            "token_configured", path=str(self.path), new_file=not existed
        )
        return self.path


__all__ = ["TOKEN_KEY", "TOKEN_SECTION", "TokenStore"]
