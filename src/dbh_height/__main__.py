"""
Diameter-height modelling command
"""
import argparse
import logging
import datetime
import os
import matplotlib
from .config import AnalysisConfig, load_config
from .processor import run

matplotlib.use('Agg')
logger = logging.getLogger(__name__)


def setup_logging(log_dir: str = 'logs') -> str:
    """
    Log everything to a timestamped file and warnings to the console

    Returns:
        path of the log file
    """
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, f'{datetime.datetime.now().strftime("%Y%m%d_%H%M%S")}.log')
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        filename=log_file,
        filemode='a',
        force=True
    )

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    logging.getLogger().addHandler(console)
    return log_file


def main():
    parser = argparse.ArgumentParser(description="Fit and compare height-diameter models")
    parser.add_argument("--config", type=str, default=None, help="JSON analysis configuration")
    parser.add_argument("--output-dir", type=str, default=None)
    parser.add_argument("--plots", action="store_true", help="also write figures")
    args = parser.parse_args()

    setup_logging()

    config = load_config(args.config) if args.config else AnalysisConfig()
    if args.output_dir is not None:
        config.output_dir = args.output_dir
    if args.plots:
        config.create_plots = True

    logger.info("Starting the application")
    run(config)


if __name__ == "__main__":
    main()
