import os
import sys
from pathlib import Path
from dataclasses import dataclass

# Lil helper function to create missing directories if missing, and optionally error out when a path
# doesn't exist.
def ensure_directory(path: Path,must_exist=False):
    if must_exist:
        if not path.exists():
            raise FileNotFoundError(f"Required directory is missing: {path}")
        if not path.is_dir():
            raise NotADirectoryError(f"Expected a directory, got a file: {path}")
    else:
        path.mkdir(parents=True,exist_ok=True)
    return path

# Picks the per-user data folder. METROCHRONO_HOME always wins, which is also how the tests keep out of
# the real home directory.
def default_data_directory() -> Path:
    override = os.getenv("METROCHRONO_HOME")
    if override:
        return Path(override).expanduser()
    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise RuntimeError("Missing APPDATA environment variable, cannot determine data directories.")
        return Path(appdata) / "MetroChrono"
    xdg_data = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data) if xdg_data else Path.home() / ".local" / "share"
    return base / "metrochrono"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path

    @staticmethod
    def build(data: Path | None = None):
        # Folder for all metrochrono user-specific stuff (settings, logs)
        data = ensure_directory(data or default_data_directory())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")

        return ProjectPaths(
            data = data,
            logs = logs,
        )
PATHS = ProjectPaths.build()
