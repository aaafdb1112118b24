"""
Editor state shared by the CLI and the remediation dialog.
"""
import logging
from pathlib import Path
from typing import Optional

from .exceptions import NoErrorToFix
from ..models.editor import EditorSnapshot
from ..utils.file_utils import FileUtils

logger = logging.getLogger(__name__)

class EditorStore:
    """
    Holds the current code, language and last error. There is one writer (the
    command that loaded the code); readers only ever get an EditorSnapshot.
    """

    def __init__(self, code: str = "", language: str = "text", error: Optional[str] = None):
        self._code = code
        self._language = language
        self._error = error

    @classmethod
    def from_file(cls, file_path: Path, content: str, language: Optional[str] = None,
                  error: Optional[str] = None) -> "EditorStore":
        language = language or FileUtils.get_language_from_extension(file_path.suffix)
        return cls(code=content, language=language, error=error)

    @property
    def language(self) -> str:
        return self._language

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def has_error(self) -> bool:
        return bool(self._error and self._error.strip())

    def get_code(self) -> str:
        return self._code

    def set_code(self, code: str):
        self._code = code

    def set_language(self, language: str):
        self._language = language

    def set_error(self, error: Optional[str]):
        self._error = error

    def clear_error(self):
        self._error = None

    def snapshot(self) -> EditorSnapshot:
        """Returns a frozen copy of the state. A remediation needs an error, so refuse without one."""
        if not self.has_error:
            raise NoErrorToFix()
        logger.debug(f"Editor snapshot taken: language={self._language}, {len(self._code)} chars of code")
        return EditorSnapshot(code=self._code, language=self._language, error=self._error)
