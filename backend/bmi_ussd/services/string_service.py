import json
import logging
from copy import deepcopy
from typing import Dict, Optional, Sequence

from bmi_ussd.config import strings as default_strings
from bmi_ussd.config.settings import settings
from bmi_ussd.models.session import BmiResult, MenuState, UssdSession
from bmi_ussd.workflows.definitions import MENU

logger = logging.getLogger(__name__)

class StringService:
    def __init__(self, languages: Dict[str, str], default_language: str, history_limit: int = 3):
        self.languages = dict(languages)
        self.default_language = default_language
        self.history_limit = history_limit
        self._templates: Dict[str, Dict[str, str]] = {}
        self._category_labels: Dict[str, Dict[str, str]] = {}
        self._tips: Dict[str, Dict[str, str]] = {}
        self._load_defaults()

    def load_strings(self, override_path: Optional[str] = None):
        """Loads template overrides from a JSON file on top of the defaults."""
        self._load_defaults()
        if not override_path:
            return
        logger.info(f"Loading string overrides from {override_path}...")
        try:
            with open(override_path, encoding="utf-8") as f:
                overrides = json.load(f)
            for section, target in (("templates", self._templates),
                                    ("category_labels", self._category_labels),
                                    ("health_tips", self._tips)):
                for key, by_language in overrides.get(section, {}).items():
                    target.setdefault(key, {}).update(by_language)
            logger.info(f"Successfully loaded overrides for {len(overrides.get('templates', {}))} templates.")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load string overrides: {e}", exc_info=True)
            # Fall back to the defaults from the strings module
            self._load_defaults()

    def _load_defaults(self):
        self._templates = deepcopy(default_strings.TEMPLATES)
        self._category_labels = deepcopy(default_strings.CATEGORY_LABELS)
        self._tips = deepcopy(default_strings.HEALTH_TIPS)

    def _pick(self, table: Dict[str, Dict[str, str]], key: str, language: str) -> str:
        by_language = table[key]
        if language in by_language:
            return by_language[language]
        return by_language[self.default_language]

    def get_string(self, key: str, language: str, **params) -> str:
        """Gets a template in the given language (default language if missing) and fills it."""
        template = self._pick(self._templates, key, language)
        return template.format(**params) if params else template

    def category_label(self, category: str, language: str) -> str:
        return self._pick(self._category_labels, category, language)

    def language_options(self) -> str:
        return "\n".join(
            f"{option}. {default_strings.LANGUAGE_NAMES[code]}"
            for option, code in sorted(self.languages.items())
        )

    def format_history(self, history: Sequence[BmiResult], language: str) -> str:
        if not history:
            return self.get_string("NO_HISTORY", language)
        lines = [
            self.get_string(
                "HISTORY_LINE",
                language,
                index=index,
                date=record.created_at.date().isoformat(),
                bmi=f"{record.bmi:.1f}",
                category=self.category_label(record.category.value, language)
            )
            for index, record in enumerate(history[:self.history_limit], start=1)
        ]
        return "\n".join(lines)

    def render(self, session: UssdSession, history: Sequence[BmiResult] = ()) -> str:
        """
        Renders the prompt of the session's current screen.

        Pure: the same session and history always give the same text, and the
        session is never modified.
        """
        language = session.language
        key = MENU[session.state]["prompt"]

        if session.state == MenuState.WELCOME:
            return self.get_string(key, language, language_options=self.language_options())

        if session.state == MenuState.RESULT:
            return self.get_string(
                key,
                language,
                bmi=f"{session.bmi:.1f}",
                category=self.category_label(session.category.value, language)
            )

        if session.state == MenuState.TIPS:
            return self.get_string(key, language, tips=self._pick(self._tips, session.category.value, language))

        if session.state == MenuState.HISTORY:
            return self.get_string(
                key,
                language,
                limit=self.history_limit,
                history=self.format_history(history, language)
            )

        return self.get_string(key, language)

# Globally accessible instance
string_service = StringService(settings.languages, settings.default_language, settings.history_limit)
