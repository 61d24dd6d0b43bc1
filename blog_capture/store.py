import datetime
import logging
import os
import re
from typing import Tuple

from blog_capture.errors import ArtifactNotFoundError, SessionNotFoundError

"""
Session-scoped artifact storage on the local filesystem.

Layout:
    <captures_dir>/<session_id>/<date>_<name>_<ordinal>.png

Sessions are never deleted here; retention is handled outside this package.
"""

logger = logging.getLogger(__name__)

PATH_HOSTILE_CHARS = re.compile(r'[<>:"/\\|?*]')
SESSION_ID_PATTERN = re.compile(r"^[0-9A-Za-z_-]+$")


def safe_filename_part(value: str) -> str:
    """
    Replace characters that are not allowed in filenames (<>:"/\\|?*) with underscores.
    """
    return PATH_HOSTILE_CHARS.sub("_", value)


def artifact_filename(date: str, name: str, ordinal: int) -> str:
    """
    Deterministic filename for the ordinal-th item of a batch.
    Two items with the same date, name and ordinal map to the same file (last write wins).
    """
    return f"{safe_filename_part(date)}_{safe_filename_part(name)}_{ordinal}.png"


def _is_plain_component(value: str) -> bool:
    return bool(value) and value not in (".", "..") and os.path.basename(value) == value and "\\" not in value


class ArtifactStore:
    """
    Owns the captures root directory. Every read/write of session directories goes through here.
    """

    def __init__(self, root_dir: str) -> None:
        self.root_dir = os.path.abspath(root_dir)

    def create_session(self) -> Tuple[str, str]:
        """
        Create a fresh session directory and return (session_id, directory).
        Ids are microsecond timestamps; a clash with an existing directory just yields a new id.
        """
        os.makedirs(self.root_dir, exist_ok=True)
        while True:
            session_id = datetime.datetime.now().strftime("%Y%m%d%H%M%S%f")
            directory = os.path.join(self.root_dir, session_id)
            try:
                os.makedirs(directory)
            except FileExistsError:
                continue
            logger.info(f"Created capture session {session_id} => {directory}")
            return session_id, directory

    def session_dir(self, session_id: str) -> str:
        return os.path.join(self.root_dir, session_id)

    def exists(self, session_id: str) -> bool:
        """True if session_id is a well-formed id with a directory on disk."""
        if not session_id or not SESSION_ID_PATTERN.match(session_id):
            return False
        return os.path.isdir(self.session_dir(session_id))

    def require_session(self, session_id: str) -> str:
        """Directory of an existing session, or SessionNotFoundError."""
        if not self.exists(session_id):
            raise SessionNotFoundError(f"Session not found: {session_id}")
        return self.session_dir(session_id)

    def resolve(self, session_id: str, filename: str) -> str:
        """
        Absolute path of an artifact, or ArtifactNotFoundError if it does not exist.
        Filenames with path separators or parent references are rejected the same way.
        """
        if not self.exists(session_id) or not _is_plain_component(filename):
            raise ArtifactNotFoundError(f"Artifact not found: {session_id}/{filename}")
        path = os.path.join(self.session_dir(session_id), filename)
        if not os.path.isfile(path):
            raise ArtifactNotFoundError(f"Artifact not found: {session_id}/{filename}")
        return path
