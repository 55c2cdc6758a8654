from logging.handlers import RotatingFileHandler as _RotatingFileHandler
from pathlib import Path


class RotatingFileHandler(_RotatingFileHandler):
    """Rotating file handler that creates the log directory on first use.

    Defaults to 10 MiB files with five backups.
    """

    def __init__(
        self,
        filename: str,
        mode: str = "a",
        maxBytes: int = 10485760,
        backupCount: int = 5,
        encoding: str | None = "utf-8",
        **kwargs,
    ):
        Path(filename).absolute().parent.mkdir(exist_ok=True, parents=True)
        super().__init__(
            filename,
            mode=mode,
            maxBytes=maxBytes,
            backupCount=backupCount,
            encoding=encoding,
            **kwargs,
        )
