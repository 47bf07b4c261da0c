"""Factory for creating LLM client instances."""

from collections.abc import Sequence

from git_brag.settings import env, load_env_file, parse_comma_list
from git_brag.summarization.repositories.implementations import RotatingProviderClient
from git_brag.summarization.repositories.key_ring import KeyRing
from git_brag.summarization.repositories.provider_gateway import Provider, ProviderGateway

_PROVIDER_KEY_ENV: dict[Provider, tuple[str, str]] = {
    Provider.GEMINI: ("GEMINI_API_KEYS", "GEMINI_API_KEY"),
    Provider.GPT: ("OPENAI_API_KEYS", "OPENAI_API_KEY"),
    Provider.CLAUDE: ("ANTHROPIC_API_KEYS", "ANTHROPIC_API_KEY"),
}

_PROVIDER_KEY_HINT: dict[Provider, str] = {
    Provider.GEMINI: "--gemini-api-key/--gemini-api-keys or GEMINI_API_KEY(S)",
    Provider.GPT: "--openai-api-key/--openai-api-keys or OPENAI_API_KEY(S)",
    Provider.CLAUDE: "--anthropic-api-key/--anthropic-api-keys or ANTHROPIC_API_KEY(S)",
}


def resolve_provider(name: str | None) -> Provider:
    """
    Resolve the provider from an explicit name or GITBRAG_PROVIDER.

    Raises:
        ValueError: If the name is not a known provider or alias
    """
    load_env_file()
    raw = name or env("GITBRAG_PROVIDER") or Provider.GEMINI.value
    provider = Provider.normalize(raw)
    if provider is None:
        raise ValueError(
            f"Invalid provider: {raw}. --provider must be gemini, gpt, or claude."
        )
    return provider


def resolve_api_keys(
    provider: Provider,
    provider_keys: Sequence[str] = (),
    generic_keys: Sequence[str] = (),
    provider_key: str | None = None,
    generic_key: str | None = None,
) -> list[str]:
    """
    Collect API keys for a provider from explicit values and the environment.

    Explicit values win over their environment counterparts. Order is
    provider list, generic list, provider single key, generic single key;
    duplicates keep their first position.

    Args:
        provider: Provider the keys are for
        provider_keys: Keys given for this provider specifically
        generic_keys: Keys given without a provider
        provider_key: Single key for this provider
        generic_key: Single generic key

    Returns:
        Deduplicated keys, possibly empty
    """
    load_env_file()
    list_env, single_env = _PROVIDER_KEY_ENV[provider]
    keys = [
        *(provider_keys or parse_comma_list(env(list_env))),
        *(generic_keys or parse_comma_list(env("GITBRAG_API_KEYS"))),
    ]
    for single in (provider_key or env(single_env), generic_key or env("GITBRAG_API_KEY")):
        if single:
            keys.append(single)
    return list(dict.fromkeys(key.strip() for key in keys if key.strip()))


def create_llm_client(
    provider: Provider,
    api_keys: Sequence[str],
    model_name: str | None = None,
    gateway: ProviderGateway | None = None,
) -> RotatingProviderClient:
    """
    Create an LLM client for a provider.

    Args:
        provider: Provider to use
        api_keys: Keys to rotate through
        model_name: Optional model override; GITBRAG_MODEL, then the
            provider default otherwise
        gateway: Optional gateway override

    Returns:
        LLM client rotating across the given keys

    Raises:
        ValueError: If no API key is available
    """
    load_env_file()
    if not any(key.strip() for key in api_keys):
        raise ValueError(f"{_PROVIDER_KEY_HINT[provider]} is required.")

    model = model_name or env("GITBRAG_MODEL") or provider.default_model
    return RotatingProviderClient(
        provider=provider,
        model=model,
        key_ring=KeyRing(api_keys),
        gateway=gateway,
    )
