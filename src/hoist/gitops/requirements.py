"""Requirements file reader and writer."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from hoist.core.exceptions import RequirementsError
from hoist.core.models import VersionStreamRef
from hoist.utils.logging import get_logger

logger = get_logger(__name__)

REQUIREMENTS_FILE_NAME = "jx-requirements.yml"
VERSION_STREAM_KEY = "versionStream"


def find_requirements_file(directory: str | Path, file_name: str = REQUIREMENTS_FILE_NAME) -> Path:
    """Find the requirements file in a directory or one of its parents.

    Args:
        directory: Directory to start looking in
        file_name: Requirements file name

    Returns:
        Path of the first match, or the path it would have in ``directory``
    """
    start = Path(directory).resolve()
    for candidate_dir in [start, *start.parents]:
        candidate = candidate_dir / file_name
        if candidate.is_file():
            return candidate
    return start / file_name


class RequirementsFile:
    """A loaded ``jx-requirements.yml``.

    Only ``versionStream`` is interpreted; every other key is written back
    untouched.
    """

    def __init__(self, path: Path, data: dict[str, Any]):
        """Initialize from parsed content.

        Args:
            path: File location
            data: Parsed YAML document
        """
        self.path = path
        self.data = data

    @classmethod
    def load(
        cls, directory: str | Path, file_name: str = REQUIREMENTS_FILE_NAME
    ) -> "RequirementsFile":
        """Load the requirements file for a GitOps clone.

        Raises:
            RequirementsError: If the file is missing or not a YAML mapping
        """
        path = find_requirements_file(directory, file_name)
        if not path.exists():
            raise RequirementsError(
                f"no requirements file {path} ensure you are running this command "
                "inside a GitOps clone"
            )

        try:
            with path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            raise RequirementsError(f"failed to load requirements config {path}: {e}") from e

        if not isinstance(data, dict):
            raise RequirementsError(f"requirements config {path} is not a YAML mapping")

        logger.debug("requirements_loaded", path=str(path))
        return cls(path, data)

    @property
    def version_stream(self) -> VersionStreamRef:
        """Get the recorded version stream.

        Raises:
            RequirementsError: If ``versionStream`` lacks url or ref
        """
        raw = self.data.get(VERSION_STREAM_KEY) or {}
        try:
            return VersionStreamRef(**raw)
        except (TypeError, ValidationError) as e:
            raise RequirementsError(
                f"invalid {VERSION_STREAM_KEY} in {self.path}: {e}"
            ) from e

    def set_version_stream_ref(self, ref: str) -> bool:
        """Record a new version stream ref.

        Args:
            ref: New ref

        Returns:
            True if the value changed
        """
        stream = self.data.setdefault(VERSION_STREAM_KEY, {})
        if stream.get("ref") == ref:
            return False
        stream["ref"] = ref
        return True

    def save(self) -> None:
        """Write the document back to its file."""
        try:
            with self.path.open("w", encoding="utf-8") as f:
                yaml.safe_dump(self.data, f, default_flow_style=False, sort_keys=False)
        except (OSError, yaml.YAMLError) as e:
            raise RequirementsError(f"failed to write requirements config {self.path}: {e}") from e

        logger.debug("requirements_saved", path=str(self.path))
