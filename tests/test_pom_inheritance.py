"""Tests for parent chains and dependency-management merging."""
import os

import pytest

from pom.decoder import decode, decode_file
from pom.errors import ArtifactNotFoundError, CyclicManifestError
from pom.management import ManagementMerger
from pom.models import Library
from pom.parent import ParentResolver
from pom.parser import Parser
from registry.maven import RepositoryLocator
from registry.maven.discovery import artifact_pom_path


def _pom(body, group="org.example", artifact="a", version="1.0.0", parent=None):
    head = ""
    if parent:
        head = (
            f"<parent><groupId>{parent[0]}</groupId><artifactId>{parent[1]}</artifactId>"
            f"<version>{parent[2]}</version><relativePath/></parent>"
        )
    return (
        f"<project>{head}<groupId>{group}</groupId><artifactId>{artifact}</artifactId>"
        f"<version>{version}</version>{body}</project>"
    ).encode()


def _managed(*entries):
    deps = "".join(
        f"<dependency><groupId>{g}</groupId><artifactId>{a}</artifactId><version>{v}</version>{extra}</dependency>"
        for g, a, v, extra in entries
    )
    return f"<dependencyManagement><dependencies>{deps}</dependencies></dependencyManagement>"


IMPORT = "<type>pom</type><scope>import</scope>"


@pytest.fixture
def repo(tmp_path):
    root = tmp_path / "repository"

    def publish(group, artifact, version, data):
        path = artifact_pom_path(str(root), group, artifact, version)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(data)

    publish.root = str(root)
    return publish


def _merger(root):
    locator = RepositoryLocator(local_repository=root)
    parents = ParentResolver(locator)
    return parents, ManagementMerger(locator, parents)


class TestParentChain:
    def test_chain_is_nearest_first(self, repo):
        repo("org.example", "grand", "1", _pom("", artifact="grand", version="1"))
        repo("org.example", "mid", "1", _pom("", artifact="mid", version="1", parent=("org.example", "grand", "1")))
        parents, _ = _merger(repo.root)
        child = decode(_pom("", artifact="child", parent=("org.example", "mid", "1")))
        assert [m.artifact_id for m in parents.chain(child)] == ["mid", "grand"]

    def test_parent_version_is_interpolated_from_child_properties(self, repo):
        repo("org.example", "parent", "2", _pom("", artifact="parent", version="2"))
        parents, _ = _merger(repo.root)
        child = decode(
            _pom("<properties><p>2</p></properties>", artifact="child", parent=("org.example", "parent", "${p}"))
        )
        assert parents.chain(child)[0].version == "2"

    def test_self_parent_is_cyclic(self, repo):
        repo("org.example", "loop", "1", _pom("", artifact="loop", version="1", parent=("org.example", "loop", "1")))
        parents, _ = _merger(repo.root)
        with pytest.raises(CyclicManifestError):
            parents.chain(decode(_pom("", artifact="child", parent=("org.example", "loop", "1"))))

    def test_mismatched_relative_parent_falls_back_to_repository(self, repo, tmp_path):
        repo("org.example", "parent", "1", _pom("<properties><from>repo</from></properties>", artifact="parent", version="1"))
        project = tmp_path / "project"
        (project / "child").mkdir(parents=True)
        (project / "pom.xml").write_bytes(_pom("", artifact="unrelated"))
        (project / "child" / "pom.xml").write_bytes(
            b"<project><parent><groupId>org.example</groupId><artifactId>parent</artifactId>"
            b"<version>1</version></parent><artifactId>child</artifactId></project>"
        )
        parents, _ = _merger(repo.root)
        model = parents.inherit(decode_file(str(project / "child" / "pom.xml")))
        assert model.properties["from"] == "repo"
        assert str(model.coordinate) == "org.example:child:1"

    def test_relative_parent_with_other_version_falls_back_to_repository(self, repo, tmp_path):
        repo("org.example", "parent", "1", _pom("<properties><from>repo</from></properties>", artifact="parent", version="1"))
        project = tmp_path / "project"
        (project / "child").mkdir(parents=True)
        (project / "pom.xml").write_bytes(
            _pom("<properties><from>disk</from></properties>", artifact="parent", version="2")
        )
        (project / "child" / "pom.xml").write_bytes(
            b"<project><parent><groupId>org.example</groupId><artifactId>parent</artifactId>"
            b"<version>1</version></parent><artifactId>child</artifactId></project>"
        )
        parents, _ = _merger(repo.root)
        model = parents.inherit(decode_file(str(project / "child" / "pom.xml")))
        assert model.properties["from"] == "repo"

    def test_relative_parent_with_matching_version_is_used(self, repo, tmp_path):
        project = tmp_path / "project"
        (project / "child").mkdir(parents=True)
        (project / "pom.xml").write_bytes(
            _pom("<properties><from>disk</from></properties>", artifact="parent", version="1")
        )
        (project / "child" / "pom.xml").write_bytes(
            b"<project><parent><groupId>org.example</groupId><artifactId>parent</artifactId>"
            b"<version>1</version></parent><artifactId>child</artifactId></project>"
        )
        parents, _ = _merger(repo.root)
        model = parents.inherit(decode_file(str(project / "child" / "pom.xml")))
        assert model.properties["from"] == "disk"

    def test_missing_parent(self, repo):
        parents, _ = _merger(repo.root)
        with pytest.raises(ArtifactNotFoundError):
            parents.chain(decode(_pom("", artifact="child", parent=("org.example", "gone", "1"))))


class TestManagementMerge:
    def test_direct_entry_beats_import_regardless_of_order(self, repo):
        repo("org.example", "bom", "1", _pom(_managed(("g", "x", "1", "")), artifact="bom", version="1"))
        parents, merger = _merger(repo.root)
        model = parents.inherit(
            decode(_pom(_managed(("org.example", "bom", "1", IMPORT), ("g", "x", "2", ""))))
        )
        assert merger.merge(model)["g:x"].version == "2"

    def test_earlier_import_wins(self, repo):
        repo("org.example", "bom1", "1", _pom(_managed(("g", "x", "1", "")), artifact="bom1", version="1"))
        repo("org.example", "bom2", "1", _pom(_managed(("g", "x", "2", ""), ("g", "y", "2", "")), artifact="bom2", version="1"))
        parents, merger = _merger(repo.root)
        model = parents.inherit(
            decode(_pom(_managed(("org.example", "bom1", "1", IMPORT), ("org.example", "bom2", "1", IMPORT))))
        )
        table = merger.merge(model)
        assert table["g:x"].version == "1"
        assert table["g:y"].version == "2"

    def test_own_import_beats_parent_direct_entry(self, repo):
        repo("org.example", "parent", "1", _pom(_managed(("g", "x", "parent", "")), artifact="parent", version="1"))
        repo("org.example", "bom", "1", _pom(_managed(("g", "x", "bom", "")), artifact="bom", version="1"))
        parents, merger = _merger(repo.root)
        model = parents.inherit(
            decode(_pom(_managed(("org.example", "bom", "1", IMPORT)), parent=("org.example", "parent", "1")))
        )
        assert merger.merge(model)["g:x"].version == "bom"

    def test_import_is_interpolated_in_its_own_context(self, repo):
        repo(
            "org.example", "bom", "1",
            _pom("<properties><v>from-bom</v></properties>" + _managed(("g", "x", "${v}", "")), artifact="bom", version="1"),
        )
        parents, merger = _merger(repo.root)
        model = parents.inherit(
            decode(_pom("<properties><v>from-importer</v></properties>" + _managed(("org.example", "bom", "1", IMPORT))))
        )
        assert merger.merge(model)["g:x"].version == "from-bom"

    def test_import_cycle(self, repo):
        repo("org.example", "bom1", "1", _pom(_managed(("org.example", "bom2", "1", IMPORT)), artifact="bom1", version="1"))
        repo("org.example", "bom2", "1", _pom(_managed(("org.example", "bom1", "1", IMPORT)), artifact="bom2", version="1"))
        parents, merger = _merger(repo.root)
        model = parents.inherit(decode(_pom(_managed(("org.example", "bom1", "1", IMPORT)))))
        with pytest.raises(CyclicManifestError):
            merger.merge(model)


def test_nearer_declarations_replace_ancestor_entries(repo, tmp_path):
    """A child's dependency and management entry fully replace the parent's for the same GA."""
    repo(
        "org.example", "parent", "1",
        _pom(
            _managed(("g", "m", "p", ""))
            + "<dependencies><dependency><groupId>g</groupId><artifactId>x</artifactId>"
            "<version>1</version><scope>test</scope></dependency></dependencies>",
            artifact="parent", version="1",
        ),
    )
    child = tmp_path / "pom.xml"
    child.write_bytes(
        _pom(
            _managed(("g", "m", "c", ""))
            + "<dependencies>"
            "<dependency><groupId>g</groupId><artifactId>x</artifactId><version>2</version></dependency>"
            "<dependency><groupId>g</groupId><artifactId>m</artifactId></dependency>"
            "</dependencies>",
            artifact="child", version="1", parent=("org.example", "parent", "1"),
        )
    )

    parents, merger = _merger(repo.root)
    model = parents.inherit(decode_file(str(child)))
    assert merger.merge(model)["g:m"].version == "c"
    (declared_x,) = [dep for dep in model.dependencies if dep.ga == "g:x"]
    assert declared_x.scope is None

    got = Parser(
        str(child), local_repository=repo.root, verify_dependencies=False, excluded_scopes=["test"]
    ).parse_file()
    assert got == [
        Library("org.example:child", "1"),
        Library("g:x", "2"),
        Library("g:m", "c"),
    ]
