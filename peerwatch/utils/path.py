import os
from pathlib import Path
from typing import Optional

PACKAGE_DIR = Path(__file__).parent.parent.resolve()

def to_abs_path(p: Optional[str | os.PathLike]) -> Optional[Path]:
    """Resolve a user-supplied path.

    Absolute paths are taken as is, relative ones are tried against the
    working directory first and the package directory second.
    """
    if not p:
        return None
    pp = Path(p).expanduser()
    if pp.is_absolute():
        return pp.resolve()
    in_cwd = Path.cwd() / pp
    if in_cwd.exists():
        return in_cwd.resolve()
    return (PACKAGE_DIR / pp).resolve()
