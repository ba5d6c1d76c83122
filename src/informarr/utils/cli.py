import argparse

from loguru import logger

from informarr.utils.logging import log_cleaner


def handle_args():
    """
    Parse CLI arguments.

    `--clean_logs` cleans old logs and exits; otherwise the parsed arguments
    are returned for the server to use.

    Returns:
        argparse.Namespace: The parsed command-line arguments.
    """
    parser = argparse.ArgumentParser(prog="informarr")
    parser.add_argument(
        "--clean_logs",
        action="store_true",
        help="Clean old logs.",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=8080,
        help="Port to run the server on (default: 8080)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Interface to bind the server to (default: 0.0.0.0)",
    )

    args = parser.parse_args()

    if args.clean_logs:
        log_cleaner()
        logger.info("Cleaned old logs.")
        exit(0)

    return args
