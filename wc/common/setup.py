import os
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

# Works out where WeekClock keeps its user data. WEEKCLOCK_HOME always wins, then the usual per-platform spots.
def resolve_data_root() -> Path:
    override = os.getenv("WEEKCLOCK_HOME")
    if override:
        return Path(override).expanduser()
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "WeekClock"
    xdg = os.getenv("XDG_DATA_HOME")
    if xdg:
        return Path(xdg) / "WeekClock"
    return Path.home() / ".local" / "share" / "WeekClock"

# Dataclass for accessing paths across program.
@dataclass(frozen=False)
class ProjectPaths:

    data: Path
    logs: Path
    current: Path

    @staticmethod
    def build(data_root: Path | None = None):
        data = ensure_directory(data_root or resolve_data_root())

        # Folders within the data folder
        logs = ensure_directory(data / "logs")
        current = ensure_directory(data / "current")

        return ProjectPaths(
            data = data,
            logs = logs,
            current = current,
        )
PATHS = ProjectPaths.build()
