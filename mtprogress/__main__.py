import json
import logging
import os
import sys
from logging import config as log_config_m

from mtprogress.config import DemoSettings
from mtprogress.orchestrator import WorkersFailedError, run
from mtprogress.terminal import ConsoleDriver
from mtprogress.utils.gate import TerminalGate

logger = logging.getLogger(__name__)


def configure_logging(logging_conf_file: str | None) -> None:
    if logging_conf_file is None or not os.path.isfile(logging_conf_file):
        return
    with open(logging_conf_file) as l_f:
        logging_config_dict = json.loads(l_f.read())
        log_config_m.dictConfig(logging_config_dict)


def main() -> int:
    settings = DemoSettings()
    configure_logging(settings.logging_conf_file)

    pid = os.getpid()
    logger.info(f"start process: [{pid}]")

    try:
        run(settings, TerminalGate(ConsoleDriver()))
    except WorkersFailedError as e:
        logger.error(f"Close app with failure: {e}")
        print(e, file=sys.stderr)
        return 1

    logger.info("Close app")
    return 0


if __name__ == "__main__":
    sys.exit(main())
