"""Generation request domain entity."""

from dataclasses import dataclass, fields

from codegen_cache.entities.entry import EntryEntity
from codegen_cache.errors import InvalidRequestError

REQUIRED_FIELDS = ("device_name", "keyword", "language", "prompt")


@dataclass(frozen=True)
class GenerationRequestEntity:
    """Input to MemoService.resolve.

    Attributes:
        device_name: Key the result is memoized under
        keyword: Tag stored alongside the result
        language: Tag stored alongside the result
        prompt: Text sent to the generation provider on a miss or refresh
        refresh: Regenerate even if an entry already exists
    """

    device_name: str
    keyword: str
    language: str
    prompt: str
    refresh: bool = False

    def validate(self) -> None:
        """Raise InvalidRequestError listing every empty required field."""
        missing = [name for name in REQUIRED_FIELDS if not getattr(self, name)]
        if missing:
            raise InvalidRequestError(f"{', '.join(missing)} must not be empty")

    def to_entry(self, output: str) -> EntryEntity:
        """Build the entry that replaces whatever is stored for this device."""
        values = {f.name: getattr(self, f.name) for f in fields(EntryEntity) if f.name != "output"}
        return EntryEntity(output=output, **values)
