"""Unit tests for stripping non-portable assembly attributes."""

from __future__ import annotations

from pclconvert.domain.entities import FileItem
from pclconvert.migration.assembly_metadata import (
    iter_file_items,
    rewrite_assembly_info_items,
    rewrite_assembly_metadata,
)
from util.fake_host import InMemoryProjectHost

ASSEMBLY_INFO = """using System.Reflection;
using System.Runtime.InteropServices;

[assembly: AssemblyTitle("Lib")]
[assembly: ComVisible(false)]
[assembly: Guid("5d3b8f3c-2f0e-4c6b-9d59-1e4a7b8c9d01")]
[assembly: AssemblyVersion("1.0.0.0")]
"""


class TestRewriteAssemblyMetadata:
    def test_scenario_c(self):
        text = '[assembly: ComVisible(false)]\n[assembly: Guid("abc")]\n'

        new_text, changed = rewrite_assembly_metadata(text)

        assert changed is True
        assert new_text == "\n\n"

    def test_keeps_other_attributes(self):
        new_text, changed = rewrite_assembly_metadata(ASSEMBLY_INFO)

        assert changed
        assert "ComVisible" not in new_text
        assert "Guid(" not in new_text
        assert '[assembly: AssemblyTitle("Lib")]' in new_text
        assert '[assembly: AssemblyVersion("1.0.0.0")]' in new_text
        assert new_text.startswith("using System.Reflection;")

    def test_second_pass_reports_no_change(self):
        once, _ = rewrite_assembly_metadata(ASSEMBLY_INFO)
        twice, changed = rewrite_assembly_metadata(once)

        assert changed is False
        assert twice == once

    def test_text_without_markers_is_unchanged(self):
        text = '[assembly: AssemblyTitle("Lib")]\n'
        assert rewrite_assembly_metadata(text) == (text, False)

    def test_com_visible_true_is_kept(self):
        text = "[assembly: ComVisible(true)]\n"
        assert rewrite_assembly_metadata(text) == (text, False)

    def test_unterminated_guid_is_left_alone(self):
        text = '[assembly: Guid("abc"\n'
        assert rewrite_assembly_metadata(text) == (text, False)

    def test_only_first_guid_is_removed(self):
        text = '[assembly: Guid("a")]\n[assembly: Guid("b")]\n'
        new_text, changed = rewrite_assembly_metadata(text)

        assert changed
        assert new_text == '\n[assembly: Guid("b")]\n'


class TestRewriteAssemblyInfoItems:
    def test_walks_nested_items(self):
        items = [FileItem(path=None, children=[FileItem(path="a"), FileItem(path="b")]), FileItem(path="c")]
        assert [i.path for i in iter_file_items(items)] == [None, "a", "b", "c"]

    def test_rewrites_only_changed_assembly_info(self):
        host = InMemoryProjectHost()
        node = host.add_project("Lib", "Lib.csproj")
        host.add_text_item("Lib", "Lib/Class1.cs", "[assembly: ComVisible(false)]")
        host.add_text_item("Lib", "Lib/Clean/AssemblyInfo.cs", '[assembly: AssemblyTitle("Lib")]')
        properties = FileItem(path=None)
        host.file_items["Lib"].append(properties)
        properties.children.append(FileItem(path="Lib/Properties/AssemblyInfo.cs"))
        host.texts["Lib/Properties/AssemblyInfo.cs"] = ASSEMBLY_INFO

        rewritten = rewrite_assembly_info_items(host, node)

        assert rewritten == ["Lib/Properties/AssemblyInfo.cs"]
        assert host.calls == [("write_text", "Lib/Properties/AssemblyInfo.cs")]
        assert "ComVisible" not in host.texts["Lib/Properties/AssemblyInfo.cs"]
        assert host.texts["Lib/Class1.cs"] == "[assembly: ComVisible(false)]"
