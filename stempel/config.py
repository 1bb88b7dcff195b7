import os
from os import path

import appdirs
import toml


DEFAULT_CONFIG_FILE = path.join(appdirs.user_config_dir('stempel', roaming=True), 'config.toml')

DEFAULT_CONFIG = {
    'storage': {
        'file': path.join(appdirs.user_data_dir('stempel', roaming=True), 'stempel.json'),
    },
    'display': {
        'style': 'simple',
    },
}


def load(file_name: str):
    cfg = {section: values.copy() for section, values in DEFAULT_CONFIG.items()}
    try:
        for section, values in toml.load(file_name).items():
            cfg.setdefault(section, {}).update(values)
    except FileNotFoundError:
        os.makedirs(path.dirname(file_name), exist_ok=True)
        with open(file_name, 'w') as f:
            toml.dump(cfg, f)

    return cfg


def storage_file(cfg: dict, override: str or None = None):
    return path.expanduser(override if override is not None else cfg['storage']['file'])
