import os
import logging
from datetime import datetime

from maccal.config import get_data_dir

def setup_logger(name, testing=False):
    """Setup logger that can be toggled for testing"""
    logger = logging.getLogger(name)

    # Only attach the shared file handler when testing is enabled
    if testing:
        log_file = os.path.join(get_data_dir(create=True), 'maccal.log')

        if not any(isinstance(h, logging.FileHandler) and h.baseFilename == log_file
                   for h in logging.root.handlers):
            handler = logging.FileHandler(log_file)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            handler.setFormatter(formatter)

            logging.root.addHandler(handler)
            logging.root.setLevel(logging.DEBUG)

            logging.info('='*50)
            logging.info(f'Logging started at {datetime.now()}')
            logging.info('='*50)

    return logger
