"""Display strings used by the records' ``__str__`` summaries.

Strings are looked up through a process-wide provider. The default provider is
the English table below; applications (and tests) can install a different
mapping with ``set_resource_provider`` and restore the default with
``reset_resource_provider``. Keys missing from an installed provider fall back
to the default table. None of these strings are part of the wire format.
"""

from typing import Mapping

DEFAULT_RESOURCES: Mapping[str, str] = {
    "ListFormat": ", {0}",
    "ListSeparator": ", ",
    "Percent": "{0}%",
    "IsPrimary": "(primary) ",
    "AssessmentToStringFormat": "{0}: {1}",
    "AlertToStringFormat": "{0} at {1}",
    "AlertTimeFormat": "{0}",
    "EmotionToStringFormatMood": "Mood: {0} ",
    "EmotionToStringFormatStress": "Stress: {0} ",
    "EmotionToStringFormatWellbeing": "Wellbeing: {0} ",
    "SleepJournalAmToStringFormat": "{0}: {1} minutes",
    "BloodGlucoseToStringFormatMmolPerL": "{0} mmol/L",
    "HeartRateZoneToStringFormatAbsolute": "{0} - {1} bpm",
    "HeartRateZoneToStringFormatPercent": "{0}% - {1}% of max heart rate",
    "AerobicProfileToStringFormatMaxHR": "Max heart rate: {0} bpm",
    "LabTestResultsToStringFormat": "{0} lab result group(s)",
    "FamilyHistoryConditionToStringFormat": "Family history: {0}",
    "OccurrenceToStringFormat": "{0} for {1} minutes",
    "GoalRangeToStringFormat": "{0} ({1} - {2})",
    "Sunday": "Sunday",
    "Monday": "Monday",
    "Tuesday": "Tuesday",
    "Wednesday": "Wednesday",
    "Thursday": "Thursday",
    "Friday": "Friday",
    "Saturday": "Saturday",
}

_provider: Mapping[str, str] = DEFAULT_RESOURCES


def set_resource_provider(provider: Mapping[str, str]) -> None:
    """Install a mapping of resource keys to display strings.

    Parameters:
        provider: Any mapping (dict, ChainMap, gettext-backed adapter, ...)
    """
    global _provider
    _provider = provider


def reset_resource_provider() -> None:
    global _provider
    _provider = DEFAULT_RESOURCES


def get_string(key: str) -> str:
    """Look up a display string, falling back to the default English text.

    Returns the key itself when neither the installed provider nor the
    default table knows it.
    """
    value = _provider.get(key)
    if value is None:
        value = DEFAULT_RESOURCES.get(key, key)
    return value


def format_string(key: str, *args) -> str:
    return get_string(key).format(*args)
