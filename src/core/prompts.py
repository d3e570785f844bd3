"""
Input providers and project answer collection.
"""

import getpass
import logging
from typing import Callable, Dict, Mapping, Optional

from pydantic import ValidationError

from .errors import InvalidInput, MissingRequiredInput
from ..models.project import ProjectConfig


REQUIRED_FIELDS = ("contact_email", "api_key")

# Field name -> (question, secret)
QUESTIONS = {
    "project_name": ("Project name", False),
    "contact_email": ("Contact email", False),
    "support_url": ("Support URL", False),
    "api_key": ("API key", True),
    "vendor": ("Vendor", False),
}


class InputProvider:
    """Answers questions for missing project fields."""

    def ask(self, field: str, question: str, default: Optional[str] = None,
            secret: bool = False) -> Optional[str]:
        raise NotImplementedError


class ConsoleInputProvider(InputProvider):
    """Blocking prompts on the terminal; secrets are read without echo."""

    def __init__(self, input_func: Callable[[str], str] = input,
                 secret_func: Callable[[str], str] = getpass.getpass):
        self.input_func = input_func
        self.secret_func = secret_func

    def ask(self, field, question, default=None, secret=False):
        if secret:
            suffix = " [stored]" if default else ""
        else:
            suffix = f" [{default}]" if default else ""
        reader = self.secret_func if secret else self.input_func
        try:
            answer = reader(f"{question}{suffix}: ").strip()
        except EOFError:
            answer = ""
        return answer or default


class StaticInputProvider(InputProvider):
    """Predetermined answers keyed by field name, for scripted runs and tests."""

    def __init__(self, answers: Mapping[str, str]):
        self.answers: Dict[str, str] = dict(answers)
        self.asked = []

    def ask(self, field, question, default=None, secret=False):
        self.asked.append(field)
        return self.answers.get(field) or default


class NonInteractiveInputProvider(InputProvider):
    """Never answers; missing fields stay missing."""

    def ask(self, field, question, default=None, secret=False):
        return None


def collect_project_config(values: Mapping[str, Optional[str]],
                           provider: InputProvider,
                           defaults: Optional[Mapping[str, Optional[str]]] = None,
                           prompt_defaults: Optional[Mapping[str, Optional[str]]] = None) -> ProjectConfig:
    """
    Build a ProjectConfig from given values, prompting for whatever is absent.

    Args:
        values: Answers already known (command line, config file)
        provider: Where answers for missing fields come from
        defaults: Fallbacks applied after prompting (e.g. default project name)
        prompt_defaults: Suggestions offered to the provider while prompting

    Raises:
        MissingRequiredInput: email or API key still missing after prompting
        InvalidInput: an answer failed validation
    """
    logger = logging.getLogger(__name__)
    defaults = defaults or {}
    prompt_defaults = prompt_defaults or {}
    answers: Dict[str, Optional[str]] = {}

    for field, (question, secret) in QUESTIONS.items():
        value = values.get(field)
        if value is not None and str(value).strip():
            answers[field] = str(value).strip()
            continue

        suggestion = prompt_defaults.get(field) or defaults.get(field)
        answer = provider.ask(field, question, default=suggestion, secret=secret)
        if answer is None or not str(answer).strip():
            answer = defaults.get(field)
        answers[field] = str(answer).strip() if answer else None

    missing = [field for field in REQUIRED_FIELDS if not answers.get(field)]
    if not answers.get("project_name"):
        missing.insert(0, "project_name")
    if missing:
        logger.error(f"Missing required input: {', '.join(missing)}")
        raise MissingRequiredInput(missing)

    try:
        return ProjectConfig(**answers)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise InvalidInput(f"Invalid project configuration: {messages}") from e
