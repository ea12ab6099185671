import logging

from loadview.gui.main_widget import launch_main
from loadview.logger import setup_logging
from loadview.startup import initialize_app

setup_logging()
settings = initialize_app()
logger = logging.getLogger(__name__)


def CLI_parser():
    launch_main(settings)


if __name__ == "__main__":
    CLI_parser()
