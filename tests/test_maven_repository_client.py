"""Tests for RepositoryLocator lookups across local and remote repositories."""
import os
import threading
from unittest.mock import MagicMock, patch

import pytest

from pom.errors import ArtifactNotFoundError
from pom.models import Coordinate
from registry.maven import RepositoryLocator, artifact_pom_url, metadata_url, parse_metadata_versions
from registry.maven.discovery import artifact_pom_path

TESTDATA = os.path.join(os.path.dirname(__file__), "testdata")
REPOSITORY = os.path.join(TESTDATA, "repository")

API = Coordinate("org.example", "example-api", "1.7.30")
MISSING = Coordinate("org.example", "example-not-found", "999")


def _response(status_code, content=b""):
    res = MagicMock()
    res.status_code = status_code
    res.content = content
    return res


def test_layout_helpers():
    assert artifact_pom_url("https://repo.example.com/maven2/", "org.example", "a", "1.0") == (
        "https://repo.example.com/maven2/org/example/a/1.0/a-1.0.pom"
    )
    assert metadata_url("https://repo.example.com", "org.example", "a") == (
        "https://repo.example.com/org/example/a/maven-metadata.xml"
    )
    assert artifact_pom_path("/repo", "org.example", "a", "1.0") == os.path.join(
        "/repo", "org", "example", "a", "1.0", "a-1.0.pom"
    )


def test_parse_metadata_versions():
    data = (
        b"<metadata><groupId>g</groupId><artifactId>a</artifactId><versioning>"
        b"<versions><version>1.0</version><version> 2.0 </version><version/></versions>"
        b"</versioning></metadata>"
    )
    assert parse_metadata_versions(data) == ["1.0", "2.0"]
    assert parse_metadata_versions(b"<metadata>") == []
    assert parse_metadata_versions(b"<metadata/>") == []


class TestLocalRepository:
    def test_locate_reads_local_file(self):
        locator = RepositoryLocator(local_repository=REPOSITORY)
        data = locator.locate(API)
        assert b"<artifactId>example-api</artifactId>" in data

    def test_missing_raises_with_exact_message(self):
        locator = RepositoryLocator(local_repository=REPOSITORY)
        with pytest.raises(ArtifactNotFoundError) as exc_info:
            locator.locate(MISSING)
        assert str(exc_info.value) == "org.example:example-not-found:999 was not found in local/remote repositories"
        assert exc_info.value.coordinate == MISSING

    def test_no_sources_never_finds_anything(self):
        locator = RepositoryLocator()
        assert not locator.has_sources
        assert locator.exists(API) is False

    def test_hits_and_misses_are_memoized(self):
        locator = RepositoryLocator(local_repository=REPOSITORY)
        locator.locate(API)
        locator.locate(API)
        assert locator.exists(MISSING) is False
        assert locator.exists(MISSING) is False
        assert locator.fetch_count == 2

    def test_versions_from_local_metadata(self):
        locator = RepositoryLocator(local_repository=REPOSITORY)
        assert locator.versions("org.example", "example-api") == ["1.7.30", "2.0.0"]
        assert locator.versions("org.example", "no-such-artifact") == []


class TestRemoteRepository:
    def test_non_2xx_falls_through_to_next_repository(self):
        first = "https://first.example.com/maven2"
        second = "https://second.example.com/maven2"
        calls = []

        def fake_get(url, **kwargs):
            calls.append(url)
            if url.startswith(first):
                return _response(404)
            return _response(200, b"<project/>")

        with patch("registry.maven.safe_get", side_effect=fake_get):
            locator = RepositoryLocator(remote_repositories=[first, second + "/"])
            assert locator.locate(API) == b"<project/>"

        assert calls == [
            artifact_pom_url(first, "org.example", "example-api", "1.7.30"),
            artifact_pom_url(second, "org.example", "example-api", "1.7.30"),
        ]

    def test_transport_failure_is_treated_as_miss(self):
        with patch("registry.maven.safe_get", return_value=None) as mock_get:
            locator = RepositoryLocator(remote_repositories=["https://down.example.com"])
            with pytest.raises(ArtifactNotFoundError):
                locator.locate(API)
        mock_get.assert_called_once()

    def test_local_repository_is_tried_first(self):
        with patch("registry.maven.safe_get") as mock_get:
            locator = RepositoryLocator(local_repository=REPOSITORY, remote_repositories=["https://r.example.com"])
            locator.locate(API)
        mock_get.assert_not_called()

    def test_remote_versions_are_merged_after_local(self):
        metadata = (
            b"<metadata><versioning><versions><version>2.0.0</version>"
            b"<version>2.1.0</version></versions></versioning></metadata>"
        )
        with patch("registry.maven.safe_get", return_value=_response(200, metadata)):
            locator = RepositoryLocator(local_repository=REPOSITORY, remote_repositories=["https://r.example.com"])
            assert locator.versions("org.example", "example-api") == ["1.7.30", "2.0.0", "2.1.0"]

    def test_session_is_passed_through(self):
        session = MagicMock()
        with patch("registry.maven.safe_get", return_value=_response(200, b"<project/>")) as mock_get:
            RepositoryLocator(remote_repositories=["https://r.example.com"], session=session).locate(API)
        assert mock_get.call_args.kwargs["session"] is session


class TestConcurrentLookups:
    def _run_threads(self, target, count):
        threads = [threading.Thread(target=target, args=(i,)) for i in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    def test_distinct_coordinates_are_each_counted(self):
        with patch("registry.maven.safe_get", return_value=_response(404)):
            locator = RepositoryLocator(remote_repositories=["https://r.example.com"])
            self._run_threads(lambda i: locator.exists(Coordinate("g", f"a{i}", "1")), 16)
        assert locator.fetch_count == 16

    def test_same_coordinate_is_fetched_once(self):
        with patch("registry.maven.safe_get", return_value=_response(200, b"<project/>")) as mock_get:
            locator = RepositoryLocator(remote_repositories=["https://r.example.com"])
            self._run_threads(lambda i: locator.locate(API), 8)
        assert locator.fetch_count == 1
        mock_get.assert_called_once()
