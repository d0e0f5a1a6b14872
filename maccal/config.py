import os
import json
import logging

DEFAULT_CONFIG = {
    'default_calendar': None,
    'testing_mode': False
}

def get_data_dir(create=False):
    """Get MacCal data directory; only created when create is set"""
    data_dir = os.getenv('maccal_data')
    if not data_dir:
        data_dir = os.path.expanduser('~/Library/Application Support/MacCal')
    if create:
        os.makedirs(data_dir, exist_ok=True)
    return data_dir

def get_config_file(create_dir=False):
    return os.path.join(get_data_dir(create=create_dir), 'config.json')

def load_config():
    """Load configuration, falling back to defaults when missing or corrupted"""
    config = dict(DEFAULT_CONFIG)
    try:
        with open(get_config_file(), 'r') as f:
            stored = json.load(f)
    except FileNotFoundError:
        return config
    except (OSError, ValueError) as e:
        logging.getLogger(__name__).error(f"Failed to load configuration: {e}")
        return config
    if isinstance(stored, dict):
        config.update(stored)
    return config

def save_config(config):
    """Save configuration to file"""
    with open(get_config_file(create_dir=True), 'w') as f:
        json.dump(config, f, indent=2)

def get_testing_mode():
    """Check if testing mode is enabled"""
    return bool(load_config().get('testing_mode', False))
