"""Tests for the shared boundary models, errors, and version parsing."""

from __future__ import annotations

import uuid
from datetime import date

import pytest
from conduit_shared.catalog_models import ActorCatalogWithUpdatedAt, SourceRead
from conduit_shared.errors import (
    ConfigNotFoundError,
    InvalidRequestError,
    ServiceUnavailableError,
    parse_id,
    to_application_error,
)
from conduit_shared.version_models import (
    ActorDefinitionVersionRead,
    BreakingChangeRead,
    SupportState,
    VersionBreakingChanges,
)
from conduit_shared.versions import Version

# ============================================================================
# Wire format
# ============================================================================


class TestVersionReadWireFormat:
    def test_without_breaking_changes_omits_block(self):
        read = ActorDefinitionVersionRead(
            docker_repository="airbyte/source-faker",
            docker_image_tag="1.0.2",
            support_state=SupportState.SUPPORTED,
            is_actor_default_version=True,
        )

        assert read.to_wire() == {
            "dockerRepository": "airbyte/source-faker",
            "dockerImageTag": "1.0.2",
            "supportState": "supported",
            "isActorDefaultVersion": True,
        }

    def test_breaking_changes_serialize_camel_case_with_iso_dates(self):
        read = ActorDefinitionVersionRead(
            docker_repository="airbyte/source-faker",
            docker_image_tag="1.0.2",
            support_state=SupportState.DEPRECATED,
            is_actor_default_version=False,
            breaking_changes=VersionBreakingChanges(
                min_upgrade_deadline=date(2023, 1, 1),
                upcoming_breaking_changes=[
                    BreakingChangeRead(
                        migration_documentation_url="https://docs.airbyte.io/2",
                        version="2.0.0",
                        upgrade_deadline=date(2023, 1, 1),
                        message="This is a breaking change",
                    )
                ],
            ),
        )

        wire = read.to_wire()

        assert wire["supportState"] == "deprecated"
        assert wire["breakingChanges"] == {
            "minUpgradeDeadline": "2023-01-01",
            "upcomingBreakingChanges": [
                {
                    "migrationDocumentationUrl": "https://docs.airbyte.io/2",
                    "version": "2.0.0",
                    "upgradeDeadline": "2023-01-01",
                    "message": "This is a breaking change",
                }
            ],
        }

    def test_wire_payload_validates_back(self):
        wire = {
            "dockerRepository": "airbyte/destination-postgres",
            "dockerImageTag": "0.4.0",
            "supportState": "unsupported",
            "isActorDefaultVersion": False,
        }

        read = ActorDefinitionVersionRead.model_validate(wire)

        assert read.support_state == SupportState.UNSUPPORTED
        assert read.breaking_changes is None


class TestControlPlanePayloads:
    def test_catalog_event_without_updated_at(self):
        assert ActorCatalogWithUpdatedAt.model_validate({}).updated_at is None

    def test_source_read_from_camel_case(self):
        source_id, definition_id = uuid.uuid4(), uuid.uuid4()

        source = SourceRead.model_validate(
            {"sourceId": str(source_id), "sourceDefinitionId": str(definition_id), "name": "Faker"}
        )

        assert source.source_id == source_id
        assert source.workspace_id is None


# ============================================================================
# Errors
# ============================================================================


class TestErrors:
    def test_parse_id_accepts_uuid_and_string(self):
        value = uuid.uuid4()
        assert parse_id(value, "source_id") is value
        assert parse_id(str(value), "source_id") == value

    def test_parse_id_rejects_malformed(self):
        with pytest.raises(InvalidRequestError, match="Malformed source_id"):
            parse_id("not-a-uuid", "source_id")

    def test_not_found_maps_to_non_retryable_application_error(self):
        error = ConfigNotFoundError("source", "abc")

        app_error = to_application_error(error)

        assert app_error.type == "ConfigNotFoundError"
        assert app_error.non_retryable is True
        assert app_error.details[0]["config_type"] == "source"

    def test_unavailable_stays_retryable(self):
        app_error = to_application_error(ServiceUnavailableError("redis down"))

        assert app_error.type == "ServiceUnavailableError"
        assert app_error.non_retryable is False


# ============================================================================
# Semantic versions
# ============================================================================


class TestVersion:
    def test_numeric_ordering(self):
        assert Version.parse("1.10.0") > Version.parse("1.9.3")
        assert Version.parse("2.0.0") > Version.parse("1.99.99")

    def test_prerelease_suffix_ignored(self):
        assert Version.parse("2.0.0-rc.1") == Version.parse("2.0.0")

    @pytest.mark.parametrize("tag", ["dev", "latest", "1.0", ""])
    def test_non_semantic_tags(self, tag):
        assert Version.try_parse(tag) is None
        with pytest.raises(ValueError):
            Version.parse(tag)
