"""
Configuration file loading

Reads a configuration file into the nested mapping consumed by
``ServiceGraphContainer.load_from_array()``::

    parameters:
        mailer.class: app.mail.Mailer
        mailer.transport: smtp

    services:
        mailer:
            class: '%mailer.class%'
            arguments: ['%mailer.transport%', '@logger?']
"""

import json
import logging
import os
from typing import Any, Dict

import yaml

from .exceptions import ConfigFileNotFoundError, InvalidFileError

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = ('yml', 'yaml')
JSON_EXTENSIONS = ('json',)


def load_file(path: str) -> Dict[str, Any]:
    """Parse a YAML or JSON configuration file.

    Args:
        path: Path to a ``.yml``, ``.yaml`` or ``.json`` file

    Returns:
        The top level mapping (empty for an empty YAML document)

    Raises:
        ConfigFileNotFoundError: When the file does not exist
        InvalidFileError: When the format is unsupported or the content
            cannot be parsed into a mapping
    """
    if not os.path.isfile(path):
        raise ConfigFileNotFoundError(f'Could not find file "{path}" to load into the container.')

    extension = os.path.splitext(path)[1].lstrip('.').lower()
    if extension not in YAML_EXTENSIONS + JSON_EXTENSIONS:
        raise InvalidFileError(
            f'Unrecognized file type "{extension}" could not be loaded into the container. '
            f'Supported formats are YAML (.yml, .yaml) and JSON (.json)'
        )

    with open(path, 'r', encoding='utf-8') as f:
        if extension in YAML_EXTENSIONS:
            try:
                definitions = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise InvalidFileError(f'Could not parse YAML file "{path}": {e}') from e
        else:
            try:
                definitions = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidFileError(f'Could not parse JSON file "{path}": {e}') from e

    if definitions is None:
        definitions = {}

    if not isinstance(definitions, dict):
        raise InvalidFileError(f'File "{path}" must contain a mapping at the top level.')

    logger.debug("Loaded configuration file %s", path)
    return definitions
