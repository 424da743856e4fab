"""Shared templates: Typst layouts and localization tables."""
from pathlib import Path

TEMPLATES_DIR = Path(__file__).parent

# Localization tables, one YAML file per language
L10N_DIR = TEMPLATES_DIR / 'l10n'
