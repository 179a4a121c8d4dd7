"""
Static Corpus Store

Plain-text knowledge files on disk, one ``<topic>.txt`` per topic. A missing
file means the topic has no document; it is not an error.
"""

from pathlib import Path
from typing import List, Optional, Union

from supportdesk.config import settings
from supportdesk.logger import get_logger

logger = get_logger(__name__)


class CorpusStore:
    """
    Reads topic knowledge files from a directory.

    Example:
        store = CorpusStore("./data")
        text = store.read("returns")
        if text is None:
            ...  # no corpus for this topic
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None, suffix: str = ".txt"):
        self.directory = Path(directory) if directory is not None else settings.data.path
        self.suffix = suffix

    def path_for(self, topic: str) -> Path:
        """Location of the file backing a topic."""
        return self.directory / f"{topic}{self.suffix}"

    def exists(self, topic: str) -> bool:
        return self.path_for(topic).is_file()

    def read(self, topic: str) -> Optional[str]:
        """
        Read a topic's knowledge text.

        Returns:
            The file content, or None when the topic has no readable file
        """
        path = self.path_for(topic)
        if not path.is_file():
            logger.warning(f"Knowledge file not found: {path}")
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Error reading knowledge file {path}: {e}")
            return None

    def topics(self) -> List[str]:
        """Topics that currently have a knowledge file."""
        if not self.directory.is_dir():
            return []
        return sorted(p.stem for p in self.directory.glob(f"*{self.suffix}"))
