from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from messenger.domain.entities import Claims
from messenger.domain.exceptions import Conflict, NotFound
from messenger.gateways.interfaces import IProfileGateway
from messenger.infrastructure import schemas
from messenger.interactors.profile_interactor import (
    ProfileInteractor,
    display_name_from,
    generate_tag,
)


@pytest.fixture
def mock_profile_gateway():
    gateway = Mock(spec=IProfileGateway)
    for name in (
        "get_profile",
        "get_by_tag",
        "create_profile",
        "update_profile",
        "search_profiles",
    ):
        setattr(gateway, name, AsyncMock())
    return gateway


@pytest.fixture
def profile_interactor(mock_profile_gateway):
    return ProfileInteractor(mock_profile_gateway, search_min_length=2, search_limit=20)


def make_profile(user_id="u1", tag="ann_0a1b", **extra):
    profile = Mock()
    profile.user_id = user_id
    profile.tag = tag
    profile.display_name = extra.get("display_name")
    profile.bio = extra.get("bio")
    profile.language = extra.get("language", "en")
    profile.is_online = extra.get("is_online", True)
    profile.last_seen = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return profile


class TestTagGeneration:
    def test_tag_from_first_name(self):
        tag = generate_tag("someone@example.com", "Ann-Marie")
        base, suffix = tag.rsplit("_", 1)
        assert base == "annmarie"
        assert len(suffix) == 4
        assert suffix.isalnum() and suffix == suffix.lower()

    def test_tag_from_email(self):
        assert generate_tag("j.doe@example.com").startswith("jdoe_")

    def test_tag_fallback(self):
        assert generate_tag(None, None).startswith("user_")
        assert generate_tag("@example.com", "!!!").startswith("user_")

    def test_display_name(self):
        assert display_name_from(Claims("u", first_name="Ann", last_name="Lee")) == "Ann Lee"
        assert display_name_from(Claims("u", first_name="Ann")) == "Ann"
        assert display_name_from(Claims("u")) is None


class TestProfileInteractor:
    async def test_get_profile(self, profile_interactor, mock_profile_gateway):
        mock_profile_gateway.get_profile.return_value = make_profile()

        result = await profile_interactor.get_profile("u1")

        assert isinstance(result, schemas.Profile)
        assert result.tag == "ann_0a1b"
        mock_profile_gateway.get_profile.assert_called_once_with("u1")

    async def test_get_profile_not_found(self, profile_interactor, mock_profile_gateway):
        mock_profile_gateway.get_profile.return_value = None

        with pytest.raises(NotFound):
            await profile_interactor.get_profile("missing")

    async def test_get_or_create_existing(self, profile_interactor, mock_profile_gateway):
        mock_profile_gateway.get_profile.return_value = make_profile()

        await profile_interactor.get_or_create(Claims("u1", first_name="Ann"))

        mock_profile_gateway.create_profile.assert_not_called()

    async def test_get_or_create_new(self, profile_interactor, mock_profile_gateway):
        mock_profile_gateway.get_profile.return_value = None
        mock_profile_gateway.get_by_tag.return_value = None
        mock_profile_gateway.create_profile.return_value = make_profile(
            display_name="Ann Lee"
        )

        result = await profile_interactor.get_or_create(
            Claims("u1", first_name="Ann", last_name="Lee")
        )

        assert result.display_name == "Ann Lee"
        kwargs = mock_profile_gateway.create_profile.call_args.kwargs
        assert kwargs["user_id"] == "u1"
        assert kwargs["tag"].startswith("ann_")
        assert kwargs["display_name"] == "Ann Lee"

    async def test_get_or_create_retries_taken_tag(
        self, profile_interactor, mock_profile_gateway
    ):
        mock_profile_gateway.get_profile.return_value = None
        mock_profile_gateway.get_by_tag.side_effect = [make_profile(), None]
        mock_profile_gateway.create_profile.return_value = make_profile()

        await profile_interactor.get_or_create(Claims("u1", first_name="Ann"))

        assert mock_profile_gateway.get_by_tag.await_count == 2

    async def test_get_or_create_returns_profile_created_concurrently(
        self, profile_interactor, mock_profile_gateway
    ):
        stored = make_profile(tag="ann_zzzz")
        mock_profile_gateway.get_profile.side_effect = [None, stored]
        mock_profile_gateway.get_by_tag.return_value = None
        mock_profile_gateway.create_profile.side_effect = Conflict("exists")

        result = await profile_interactor.get_or_create(Claims("u1", first_name="Ann"))

        assert result.tag == "ann_zzzz"
        mock_profile_gateway.create_profile.assert_awaited_once()

    async def test_get_or_create_retries_after_tag_collision_on_insert(
        self, profile_interactor, mock_profile_gateway
    ):
        mock_profile_gateway.get_profile.return_value = None
        mock_profile_gateway.get_by_tag.return_value = None
        mock_profile_gateway.create_profile.side_effect = [
            Conflict("tag taken"),
            make_profile(),
        ]

        result = await profile_interactor.get_or_create(Claims("u1", first_name="Ann"))

        assert result.user_id == "u1"
        assert mock_profile_gateway.create_profile.await_count == 2

    async def test_get_or_create_gives_up_when_tags_are_exhausted(
        self, profile_interactor, mock_profile_gateway
    ):
        mock_profile_gateway.get_profile.return_value = None
        mock_profile_gateway.get_by_tag.return_value = make_profile("someone_else")

        with pytest.raises(Conflict):
            await profile_interactor.get_or_create(Claims("u1", first_name="Ann"))

        mock_profile_gateway.create_profile.assert_not_called()

    async def test_update_profile_sends_only_set_fields(
        self, profile_interactor, mock_profile_gateway
    ):
        stored = make_profile()
        mock_profile_gateway.get_profile.return_value = stored
        mock_profile_gateway.update_profile.return_value = make_profile(language="ru")

        result = await profile_interactor.update_profile(
            "u1", schemas.ProfileUpdate(language="ru")
        )

        assert result.language == "ru"
        mock_profile_gateway.update_profile.assert_called_once_with(
            stored, {"language": "ru"}
        )

    async def test_search_short_query(self, profile_interactor, mock_profile_gateway):
        assert await profile_interactor.search(" a ", "u1") == []
        mock_profile_gateway.search_profiles.assert_not_called()

    async def test_search(self, profile_interactor, mock_profile_gateway):
        mock_profile_gateway.search_profiles.return_value = [make_profile("u2")]

        result = await profile_interactor.search(" ann ", "u1")

        assert [p.user_id for p in result] == ["u2"]
        mock_profile_gateway.search_profiles.assert_called_once_with("ann", "u1", limit=20)
