import json
import logging
import os
from pathlib import Path
from typing import Optional

from client_state import Session

logger = logging.getLogger(__name__)

DEFAULT_SESSION_PATH = Path.home() / ".taskflow" / "session.json"


class SessionStore:
    """Keeps the logged-in user and token on disk between runs."""

    def __init__(self, path=DEFAULT_SESSION_PATH):
        self.path = Path(path)

    def load(self) -> Optional[Session]:
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return Session(user=data["user"], token=data["token"])
        except (json.JSONDecodeError, KeyError, TypeError, OSError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return None

    def save(self, session: Session) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump({"user": session.user, "token": session.token}, f, ensure_ascii=False, indent=2)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
