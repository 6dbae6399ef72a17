"""Tests for VersionStatus, Platform and AppIdentity."""

import dataclasses

import pytest

from newversion.core.errors import NotFound
from newversion.core.models import AppIdentity, Platform, VersionStatus


class TestVersionStatus:

    def test_can_update_when_store_is_newer(self):
        assert VersionStatus("1.0.0", "1.2.0").can_update is True

    def test_no_update_when_local_is_newer(self):
        assert VersionStatus("1.2.0", "1.0.0").can_update is False

    def test_missing_store_version_means_no_update(self):
        status = VersionStatus("1.2.0", error=NotFound("com.example.app"))
        assert status.can_update is False
        assert status.is_conclusive is False

    def test_store_version_with_extra_segment(self):
        assert VersionStatus("1.2.0", "1.2.0.1").can_update is True
        assert VersionStatus("1.2.0.1", "1.2.0").can_update is False

    def test_missing_store_version_does_not_count_as_longer(self):
        # 1.2 vs 0.0.0 default would be "longer"; the local version is used instead
        assert VersionStatus("1.2").can_update is False

    def test_malformed_local_version(self):
        assert VersionStatus("dev-build", "1.0.0").can_update is False

    def test_immutable(self):
        status = VersionStatus("1.0.0", "1.2.0")
        with pytest.raises(dataclasses.FrozenInstanceError):
            status.store_version = "2.0.0"


class TestPlatform:

    @pytest.mark.parametrize("text,expected", [
        ("android", Platform.ANDROID),
        ("iOS", Platform.IOS),
        (" IOS ", Platform.IOS),
        ("linux", Platform.UNSUPPORTED),
        ("", Platform.UNSUPPORTED),
        (None, Platform.UNSUPPORTED),
    ])
    def test_parse(self, text, expected):
        assert Platform.parse(text) is expected

    def test_current_follows_sys_platform(self, monkeypatch):
        monkeypatch.setattr('newversion.core.models.sys.platform', 'android')
        assert Platform.current() is Platform.ANDROID
        monkeypatch.setattr('newversion.core.models.sys.platform', 'win32')
        assert Platform.current() is Platform.UNSUPPORTED


class TestAppIdentity:

    def test_from_distribution(self, monkeypatch):
        monkeypatch.setattr('newversion.core.models.distribution_version',
                            lambda name: "3.1.4")
        identity = AppIdentity.from_distribution("example-app", "com.example.app")
        assert identity == AppIdentity(version="3.1.4", package_name="com.example.app")

    def test_from_distribution_defaults_package_name(self, monkeypatch):
        monkeypatch.setattr('newversion.core.models.distribution_version',
                            lambda name: "1.0")
        assert AppIdentity.from_distribution("example-app").package_name == "example-app"
