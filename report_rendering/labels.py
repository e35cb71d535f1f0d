"""
Label Loader module.

Each template directory carries one ``language_<code>.json`` file per supported
language, mapping label keys to display strings.
"""

import json
import logging
from pathlib import Path
from typing import Dict

from .config import TEMPLATES_DIR, LANGUAGE_FILE_TEMPLATE
from .errors import LanguageFileNotFound

logger = logging.getLogger(__name__)


class LabelLoader:
    """Loads localized label sets from the template tree."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self.templates_dir = Path(templates_dir)

    def path_for(self, template_name: str, language: str) -> Path:
        return self.templates_dir / template_name / LANGUAGE_FILE_TEMPLATE.format(language=language)

    def load(self, template_name: str, language: str) -> Dict[str, str]:
        """
        Load the label set for a template and language.

        Raises:
            LanguageFileNotFound: If no label file exists for the pair
        """
        path = self.path_for(template_name, language)
        if not path.is_file():
            logger.error(f"Language file not found: {path}")
            raise LanguageFileNotFound(template_name, language, path)

        logger.debug(f"Loading language file: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            labels = json.load(f)

        return {str(key): str(value) for key, value in labels.items()}
