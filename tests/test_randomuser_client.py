from __future__ import annotations

import pytest

from adapters.randomuser_client import (
    AVAILABLE_FIELDS,
    SUPPORTED_NATIONALITIES,
    normalize_nationality,
    validate_count,
    validate_fields,
)
from core.domain.errors import ConfigError, ErrorCategory, HttpStatusError

from tests.conftest import FakeAPI
from tests.factories import COUNTS, INVALID_COUNTS, INVALID_FIELDS, INVALID_NATIONALITIES


@pytest.mark.asyncio
async def test_get_single_user(randomuser, fake_api):
    payload = await randomuser.get_single_user()

    assert len(payload["results"]) == 1
    assert fake_api.last_params() == {"format": "json", "results": "1"}


@pytest.mark.asyncio
@pytest.mark.parametrize("count", list(COUNTS.values()))
async def test_get_multiple_users(randomuser, fake_api, count):
    payload = await randomuser.get_multiple_users(count)

    assert len(payload["results"]) == count
    assert payload["info"]["results"] == count
    assert fake_api.last_params()["results"] == str(count)


@pytest.mark.asyncio
@pytest.mark.parametrize("count", INVALID_COUNTS)
async def test_invalid_count_fails_before_any_request(randomuser, fake_api, count):
    with pytest.raises(ConfigError, match="Count must be between 1 and 5000"):
        await randomuser.get_multiple_users(count)

    assert fake_api.calls == 0


@pytest.mark.asyncio
async def test_nationality_is_case_insensitive(randomuser, fake_api):
    payload = await randomuser.get_users_by_nationality("gb", 2)

    assert fake_api.last_params()["nat"] == "GB"
    assert all(user["nat"] == "GB" for user in payload["results"])


@pytest.mark.asyncio
@pytest.mark.parametrize("nationality", INVALID_NATIONALITIES)
async def test_unsupported_nationality_is_a_config_error(randomuser, fake_api, nationality):
    with pytest.raises(ConfigError) as info:
        await randomuser.get_users_by_nationality(nationality)

    assert info.value.category is ErrorCategory.CONFIG_ERROR
    assert not info.value.retryable
    assert fake_api.calls == 0


@pytest.mark.asyncio
async def test_gender_filter(randomuser, fake_api):
    payload = await randomuser.get_users_by_gender("male", 3)

    assert fake_api.last_params()["gender"] == "male"
    assert [user["gender"] for user in payload["results"]] == ["male"] * 3


@pytest.mark.asyncio
async def test_unknown_gender_rejected(randomuser, fake_api):
    with pytest.raises(ConfigError, match="Unsupported gender"):
        await randomuser.get_users_by_gender("other")
    assert fake_api.calls == 0


@pytest.mark.asyncio
async def test_include_and_exclude_fields(randomuser, fake_api):
    await randomuser.get_users_with_fields(["name", "email"])
    assert fake_api.last_params()["inc"] == "name,email"

    await randomuser.get_users_without_fields(["picture"], 2)
    assert fake_api.last_params()["exc"] == "picture"
    assert fake_api.last_params()["results"] == "2"


@pytest.mark.asyncio
async def test_invalid_fields_are_listed(randomuser, fake_api):
    with pytest.raises(ConfigError) as info:
        await randomuser.get_users_with_fields(["name", *INVALID_FIELDS])

    assert str(info.value) == "Invalid fields: invalidField, anotherInvalid, nonExistent"
    assert fake_api.calls == 0


@pytest.mark.asyncio
async def test_seed_and_page(randomuser, fake_api):
    payload = await randomuser.get_page(3, "abc", 5)

    assert fake_api.last_params()["page"] == "3"
    assert fake_api.last_params()["seed"] == "abc"
    assert payload["info"]["page"] == 3
    assert payload["info"]["seed"] == "abc"


@pytest.mark.asyncio
@pytest.mark.parametrize("page", [0, -2])
async def test_page_must_be_positive(randomuser, fake_api, page):
    with pytest.raises(ConfigError):
        await randomuser.get_page(page, "abc")
    assert fake_api.calls == 0


@pytest.mark.asyncio
async def test_blank_seed_rejected(randomuser, fake_api):
    with pytest.raises(ConfigError, match="Seed"):
        await randomuser.get_users_with_seed("  ")
    assert fake_api.calls == 0


@pytest.mark.asyncio
async def test_http_failures_surface_classified(make_client, sleep):
    from adapters.randomuser_client import RandomUserClient

    api = FakeAPI([503, 503, 503])
    client = RandomUserClient(make_client(api))

    with pytest.raises(HttpStatusError) as info:
        await client.get_single_user()

    assert info.value.category is ErrorCategory.SERVICE_UNAVAILABLE
    assert api.calls == 3
    assert sleep.delays == [1.0, 2.0]


def test_catalogues():
    assert len(SUPPORTED_NATIONALITIES) == 20
    assert "US" in SUPPORTED_NATIONALITIES
    assert set(AVAILABLE_FIELDS) >= {"name", "email", "login", "dob", "nat"}


def test_validators_directly():
    assert validate_count(5000) == 5000
    assert normalize_nationality(" fr ") == "FR"
    with pytest.raises(ConfigError, match="At least one field is required"):
        validate_fields([])
    with pytest.raises(ConfigError):
        validate_count(True)
