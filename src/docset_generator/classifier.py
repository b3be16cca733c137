"""Classify documentation pages into Dash entry types."""

from docset_generator.config import ClassifierConfig, EntryType

_DEFAULT_CONFIG = ClassifierConfig()


def classify(name: str, path_key: str, config: ClassifierConfig | None = None) -> EntryType:
    """Return the entry type for a page. The first matching rule wins.

    Path rules are checked before the provider name rule; pages matching
    nothing fall back to ``config.default``.
    """
    config = config or _DEFAULT_CONFIG

    for rule in config.rules:
        if rule.path_contains in path_key:
            return rule.entry_type

    if config.provider_keyword.lower() in name.lower():
        return EntryType.PROVIDER

    return config.default
