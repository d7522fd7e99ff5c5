"""
Tests for the filesystem project host.

Most tests run against a writable copy of tests/fixtures/ClassicSolution:

    Libraries/            (solution folder)
        Classic.Library   .NET 4.5, framework + third-party references
        Legacy.Library    listed in the .sln, file missing
    Portable.Library      already portable (Profile259)
    Tools.Net40           .NET 4.0 Client profile
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pclconvert.adapters.filesystem_host import (
    FilesystemProjectHost,
    framework_id,
    parse_assembly_identity,
)
from pclconvert.domain.entities import AssemblyReference, ProjectNode
from pclconvert.infra.exceptions import (
    AssemblyNotFoundError,
    CatalogLoadError,
    MetadataReadError,
    ProjectItemAccessError,
    ProjectUnavailableError,
    ReferenceRemovalError,
)
from pclconvert.migration.assembly_metadata import iter_file_items
from pclconvert.migration.reference_classifier import FRAMEWORK_PRODUCT_NAME
from pclconvert.runtime.session import MigrationSession
from pclconvert.usecases.project_reload import load_projects


@pytest.fixture
def host(classic_solution) -> FilesystemProjectHost:
    return FilesystemProjectHost(classic_solution)


def project(host, name) -> ProjectNode:
    for record in load_projects(host):
        if record.name == name:
            return record.node
    raise AssertionError(f"no project {name}")


class TestHelpers:
    @pytest.mark.parametrize(
        "version, expected",
        [("2.0", 131072), ("3.5", 196613), ("4.0", 262144), ("4.5", 262149), ("4.5.1", 262405)],
    )
    def test_framework_id(self, version, expected):
        assert framework_id(version) == expected

    def test_parse_full_identity(self):
        reference = parse_assembly_identity(
            "Newtonsoft.Json, Version=6.0.0.0, Culture=neutral, "
            "PublicKeyToken=30ad4fe6b2a6aeed, processorArchitecture=MSIL"
        )

        assert reference.name == "Newtonsoft.Json"
        assert reference.version == "6.0.0.0"
        assert reference.culture is None
        assert reference.public_key_token == "30ad4fe6b2a6aeed"

    def test_parse_simple_name(self):
        assert parse_assembly_identity("System") == AssemblyReference(name="System")


class TestProjectTree:
    def test_solution_folders_and_unloaded_projects(self, host):
        nodes = host.list_projects()

        assert [n.name for n in nodes] == ["Libraries", "Portable.Library", "Tools.Net40"]
        folder = nodes[0]
        assert folder.is_solution_folder
        assert folder.children[0].name == "Classic.Library"
        assert folder.children[1] is None

    def test_directory_scan(self, classic_solution):
        host = FilesystemProjectHost(classic_solution.parent)

        names = [n.name for n in host.list_projects()]

        assert names == ["Classic.Library", "Portable.Library", "Tools.Net40"]

    def test_single_project_file(self, classic_solution):
        path = classic_solution.parent / "Tools.Net40" / "Tools.Net40.csproj"

        (node,) = FilesystemProjectHost(path).list_projects()

        assert node.name == "Tools.Net40"
        assert node.file_path == str(path)

    def test_missing_root(self, tmp_path):
        assert FilesystemProjectHost(tmp_path / "nowhere.sln").list_projects() == []


class TestFrameworks:
    def test_current_frameworks(self, host):
        frameworks = {r.name: r.current_framework for r in load_projects(host)}

        assert frameworks["Classic.Library"].name == ".NETFramework,Version=v4.5"
        assert frameworks["Classic.Library"].id == 262149
        assert frameworks["Portable.Library"].name == ".NETPortable,Version=v4.5,Profile=Profile259"
        assert frameworks["Portable.Library"].is_portable
        assert frameworks["Tools.Net40"].name == ".NETFramework,Version=v4.0,Profile=Client"
        assert not frameworks["Tools.Net40"].is_portable

    def test_eligibility(self, host):
        eligible = [r.name for r in load_projects(host) if r.is_eligible]
        assert eligible == ["Classic.Library", "Portable.Library"]

    def test_project_without_version_has_no_framework(self, tmp_path):
        path = tmp_path / "Empty.csproj"
        path.write_text("<Project>\n</Project>\n", encoding="utf-8")
        host = FilesystemProjectHost(path)

        with pytest.raises(MetadataReadError):
            host.current_framework_of(host.list_projects()[0])
        assert load_projects(host) == []

    def test_save_missing_project(self, host):
        with pytest.raises(ProjectUnavailableError):
            host.save_project(ProjectNode(name="Ghost", file_path="/nonexistent/Ghost.csproj"))


class TestItems:
    def test_items_include_assembly_info(self, host):
        node = project(host, "Classic.Library")

        paths = [i.path for i in iter_file_items(host.list_file_items(node)) if i.path]

        assert any(p.endswith("AssemblyInfo.cs") for p in paths)
        assert any(p.endswith("Class1.cs") for p in paths)

    def test_write_keeps_existing_bom(self, tmp_path):
        item = tmp_path / "AssemblyInfo.cs"
        item.write_bytes(b"\xef\xbb\xbf[assembly: ComVisible(false)]\r\n")
        host = FilesystemProjectHost(tmp_path)

        assert host.read_text(str(item)) == "[assembly: ComVisible(false)]\r\n"
        host.write_text(str(item), "\r\n")

        assert item.read_bytes() == b"\xef\xbb\xbf\r\n"

    def test_write_without_bom_adds_none(self, tmp_path):
        item = tmp_path / "AssemblyInfo.cs"
        item.write_bytes(b"[assembly: ComVisible(false)]\n")
        host = FilesystemProjectHost(tmp_path)

        host.write_text(str(item), "\n")

        assert item.read_bytes() == b"\n"

    def test_undecodable_item_is_an_access_error(self, tmp_path):
        item = tmp_path / "AssemblyInfo.cs"
        item.write_bytes("// \u00a9 2014\n".encode("cp1252"))
        host = FilesystemProjectHost(tmp_path)

        with pytest.raises(ProjectItemAccessError):
            host.read_text(str(item))


class TestReferences:
    def test_lists_assembly_and_project_references(self, host):
        references = host.list_references(project(host, "Classic.Library"))

        assert [r.name for r in references] == [
            "Newtonsoft.Json",
            "System",
            "System.Core",
            "System.Xml.Linq",
            "System.Data",
            "System.Xml",
            "Shared",
        ]
        assert references[-1].has_source_project
        assert references[0].major_version == 6

    def test_remove_single_line_reference(self, host):
        node = project(host, "Classic.Library")

        host.remove_reference(node, AssemblyReference(name="System"))

        names = [r.name for r in host.list_references(node)]
        assert "System" not in names
        assert "System.Core" in names

    def test_remove_multi_line_reference(self, host):
        node = project(host, "Classic.Library")

        host.remove_reference(node, AssemblyReference(name="Newtonsoft.Json"))

        text = Path(node.file_path).read_text(encoding="utf-8")
        assert "Newtonsoft" not in text
        assert "<ItemGroup>\n    <Reference Include=\"System\" />" in text

    def test_remove_unknown_reference(self, host):
        with pytest.raises(ReferenceRemovalError):
            host.remove_reference(project(host, "Classic.Library"), AssemblyReference(name="Nope"))

    def test_removal_keeps_bom_and_crlf(self, tmp_path):
        path = tmp_path / "Lib.csproj"
        lines = [
            "<Project>",
            "<TargetFrameworkVersion>v4.5</TargetFrameworkVersion>",
            '<Reference Include="System" />',
            "</Project>",
        ]
        path.write_bytes(b"\xef\xbb\xbf" + "\r\n".join(lines).encode() + b"\r\n")
        host = FilesystemProjectHost(path)

        host.remove_reference(host.list_projects()[0], AssemblyReference(name="System"))

        expected = [lines[0], lines[1], lines[3]]
        assert path.read_bytes() == b"\xef\xbb\xbf" + "\r\n".join(expected).encode() + b"\r\n"

    def test_undecodable_project_file_is_a_removal_error(self, tmp_path):
        path = tmp_path / "Lib.csproj"
        original = (
            "<Project>\n<TargetFrameworkVersion>v4.5</TargetFrameworkVersion>\n"
            "<Copyright>\u00a9</Copyright>\n<Reference Include=\"System\" />\n</Project>\n"
        ).encode("cp1252")
        path.write_bytes(original)
        host = FilesystemProjectHost(path)

        with pytest.raises(ReferenceRemovalError):
            host.remove_reference(host.list_projects()[0], AssemblyReference(name="System"))
        assert path.read_bytes() == original


class TestAssemblyResolution:
    def test_packaged_manifest(self, host):
        assembly = host.resolve_assembly_identity(
            "System.Xml, Version=4.0.0.0, Culture=neutral, PublicKeyToken=b77a5c561934e089"
        )
        assert assembly.name == "System.Xml"
        assert assembly.product == FRAMEWORK_PRODUCT_NAME

    def test_unknown_assembly(self, host):
        with pytest.raises(AssemblyNotFoundError):
            host.resolve_assembly_identity("Newtonsoft.Json, Version=6.0.0.0")

    def test_explicit_mapping_overrides_manifest(self, classic_solution):
        host = FilesystemProjectHost(classic_solution, assemblies={"Newtonsoft.Json": "Json.NET"})

        assert host.resolve_assembly_identity("Newtonsoft.Json").product == "Json.NET"
        with pytest.raises(AssemblyNotFoundError):
            host.resolve_assembly_identity("System")

    def test_missing_manifest(self, classic_solution, tmp_path):
        with pytest.raises(CatalogLoadError):
            FilesystemProjectHost(classic_solution, assembly_manifest=tmp_path / "missing.yaml")


def test_convert_solution_end_to_end(classic_solution):
    root = classic_solution.parent
    session = MigrationSession(FilesystemProjectHost(classic_solution), newline="\r\n")
    session.reload()
    session.select()

    session.update("Profile136")
    list(session.drain(timeout=10))

    summary = session.last_summary
    assert summary.converted == ["Classic.Library"]
    assert summary.unchanged == ["Portable.Library"]
    assert summary.failed == []

    csproj = root / "Classic.Library" / "Classic.Library.csproj"
    text = csproj.read_bytes().decode("utf-8")
    assert "<TargetFrameworkProfile>Profile136</TargetFrameworkProfile>\r\n" in text
    assert "Microsoft.Portable.CSharp.targets" in text
    assert "MSBuildToolsPath" not in text
    assert '<Reference Include="System' not in text
    assert "Newtonsoft.Json" in text
    assert "Shared.csproj" in text
    assert (root / "Classic.Library" / "Classic.Library.csprojbak").is_file()

    info = (root / "Classic.Library" / "Properties" / "AssemblyInfo.cs").read_text(encoding="utf-8")
    assert "[assembly: ComVisible(false)]" not in info
    assert "[assembly: Guid(" not in info
    assert '[assembly: AssemblyVersion("1.0.0.0")]' in info

    tools = (root / "Tools.Net40" / "Tools.Net40.csproj").read_text(encoding="utf-8")
    assert "MSBuildBinPath" in tools
    assert not (root / "Tools.Net40" / "Tools.Net40.csprojbak").exists()

    frameworks = {r.name: r.current_framework.name for r in session.projects}
    assert frameworks["Classic.Library"] == ".NETPortable,Version=v4.5,Profile=Profile136"
