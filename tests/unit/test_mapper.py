"""
Unit tests for SourceSet to TargetSet conversion.
"""

from datetime import datetime, timezone

import pytest

from ibackup_devkit.core.exceptions import WrongMetadataError, WrongTransformerError
from ibackup_devkit.core.models import Reason, SetStatus
from ibackup_devkit.core.transform import META_KEY_REMOVAL, convert_set


class TestConvertSet:
    """Tests for convert_set"""

    def test_converts_humgen_set(self, source_set_factory):
        """Test converting a set that uses the humgen preset"""
        source = source_set_factory(name="set-0", transformer="humgen", reason="backup")

        target = convert_set(source)

        assert target.name == "set-0"
        assert target.requester == "test-user"
        assert target.reason is Reason.BACKUP
        assert target.review_date == datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert target.delete_date == datetime(2025, 6, 1, tzinfo=timezone.utc)
        assert target.metadata == {}
        assert target.transformer.name == "humgen"
        assert target.id is None

    def test_copies_scalar_fields_and_counters(self, source_set_factory):
        """Test that scalar fields and counters are copied verbatim"""
        started = datetime(2024, 12, 1, 8, 0, tzinfo=timezone.utc)
        source = source_set_factory(
            monitor_time=86400,
            monitor_removals=True,
            description="nightly",
            delete_local=True,
            error="disk gone",
            warning="slow",
            status=SetStatus.COMPLETE,
            started_discovery=started,
            last_completed_count=10,
            last_completed_size=2048,
            size_uploaded=4096,
            size_removed=512,
            num_objects_to_be_removed=3,
            num_objects_removed=2,
        )

        target = convert_set(source)

        assert target.monitor_time == 86400
        assert target.monitor_removals is True
        assert target.description == "nightly"
        assert target.delete_local is True
        assert target.error == "disk gone"
        assert target.warning == "slow"
        assert target.status is SetStatus.COMPLETE
        assert target.started_discovery == started
        assert target.last_completed_count == 10
        assert target.last_completed_size == 2048
        assert target.size_uploaded == 4096
        assert target.size_removed == 512
        assert target.num_objects_to_be_removed == 3
        assert target.num_objects_removed == 2

    def test_flags_are_not_copied(self, source_set_factory):
        """Test that converted sets start visible and writable"""
        target = convert_set(source_set_factory(read_only=True, hide=True))

        assert target.read_only is False
        assert target.hidden is False

    def test_residual_metadata(self, source_set_factory):
        """Test that only non-reserved metadata is kept"""
        source = source_set_factory(metadata={"project": "cohort"})

        target = convert_set(source)

        assert target.metadata == {"project": "cohort"}
        assert len(source.metadata) == 4

    def test_wrong_transformer(self, source_set_factory):
        """Test that a bad transformer specifier fails the conversion"""
        with pytest.raises(WrongTransformerError) as exc_info:
            convert_set(source_set_factory(transformer="prefix=/lustre"))

        assert exc_info.value.specifier == "prefix=/lustre"

    def test_wrong_metadata(self, source_set_factory):
        """Test that bad reserved metadata fails the conversion"""
        source = source_set_factory(removal="2025-06-01")

        with pytest.raises(WrongMetadataError) as exc_info:
            convert_set(source)

        assert exc_info.value.key == META_KEY_REMOVAL
        assert source.metadata[META_KEY_REMOVAL] == "2025-06-01"

    def test_transformer_checked_before_metadata(self, source_set_factory):
        """Test that transformer errors are reported first"""
        source = source_set_factory(transformer="bad", reason="")

        with pytest.raises(WrongTransformerError):
            convert_set(source)
