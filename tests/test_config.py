"""
Tests for settings validation and request validation.
"""

import pytest

from codegen_cache.config import Settings
from codegen_cache.entities import GenerationRequestEntity
from codegen_cache.errors import InvalidRequestError


def test_defaults_are_valid():
    config = Settings(service_api_key="s", store_backend="sqlite")

    assert config.require_service_api_key() == "s"


def test_unknown_backend_rejected():
    with pytest.raises(ValueError, match="STORE_BACKEND"):
        Settings(store_backend="mongo")


def test_negative_output_index_rejected():
    with pytest.raises(ValueError, match="OPENAI_OUTPUT_INDEX"):
        Settings(openai_output_index=-1)


def test_missing_service_api_key_is_fatal():
    with pytest.raises(RuntimeError, match="SERVICE_API_KEY"):
        Settings(service_api_key=None).require_service_api_key()


def test_request_validation_lists_all_missing_fields():
    request = GenerationRequestEntity(device_name="d", keyword="", language="", prompt="p")

    with pytest.raises(InvalidRequestError, match="keyword, language"):
        request.validate()


def test_request_builds_entry():
    request = GenerationRequestEntity("d", "k", "l", "p", refresh=True)

    entry = request.to_entry("out")

    assert (entry.device_name, entry.keyword, entry.language, entry.prompt, entry.output) == (
        "d",
        "k",
        "l",
        "p",
        "out",
    )
