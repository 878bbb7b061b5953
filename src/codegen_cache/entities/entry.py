"""Memoized entry domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EntryEntity:
    """Domain entity for one device's last prompt and its generated output.

    Instances are immutable, so a store can hand the same object to any
    number of readers and replace it wholesale on refresh.

    Attributes:
        device_name: Unique device identifier (primary key)
        keyword: Caller-supplied tag, opaque to the service
        language: Caller-supplied tag, opaque to the service
        prompt: The exact input last used to produce ``output``
        output: The generated text (may be empty)
    """

    device_name: str
    keyword: str
    language: str
    prompt: str
    output: str
