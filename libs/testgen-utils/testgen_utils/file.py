import logging
from pathlib import Path

logger = logging.getLogger("testgen")


def create_dir(path: Path):
    if path.is_file():
        raise FileExistsError(f"cannot create directory {path}, a file is in the way")
    path.mkdir(parents=True, exist_ok=True)


def create_file(path: Path, content: str):
    create_dir(path.parent)
    path.write_text(content)
    logger.debug(f"wrote {path} ({len(content)} chars)")
