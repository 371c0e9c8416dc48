from openai import AsyncOpenAI

from .config import DEFAULT_GPT_MODEL, Settings
from .errors import ConfigurationError


def get_openai_client(settings: Settings) -> AsyncOpenAI:
    if not settings.openai_api_key:
        raise ConfigurationError()
    # One upstream call per plan request: the SDK's built-in retries are disabled
    return AsyncOpenAI(api_key=settings.openai_api_key, max_retries=0)


def get_default_gpt_model(settings: Settings = None) -> str:
    """Get the GPT model used for plan generation"""
    if settings and settings.openai_model:
        return settings.openai_model
    return DEFAULT_GPT_MODEL
