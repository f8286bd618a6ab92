"""Tests for notebook and section commands."""

import json

import pytest

from graph_commands.errors import MissingTargetError, UnresolvableTargetError
from graph_commands.handles import OwnerContext
from graph_commands.models import Notebook, Section
from graph_commands.onenote import notebooks, sections

from conftest import BASE

NB_PATH = "/me/onenote/notebooks/nb1"
NB = BASE + NB_PATH
NOTEBOOK_JSON = {"id": "nb1", "displayName": "Work", "self": NB, "sectionsUrl": NB + "/sections"}


def _section(sid, name):
    return {"id": sid, "displayName": name, "self": f"{BASE}/me/onenote/sections/{sid}"}


class TestNotebooks:
    def test_list_with_name_and_expansion(self, transport, fake_graph):
        fake_graph.add("GET", "/me/onenote/notebooks", json={"value": [dict(NOTEBOOK_JSON, sections=[_section("s1", "A")])]})
        result = notebooks.list_notebooks(transport, name="WO*", expand_sections=True)

        assert [nb.display_name for nb in result] == ["Work"]
        assert result[0].sections[0].parent_notebook is result[0]
        params = fake_graph.requests[0].url.params
        assert params["$filter"] == "startswith(tolower(displayName),'wo')"
        assert params["$expand"] == "sections"

    def test_list_in_group_context(self, transport, fake_graph):
        fake_graph.add("GET", "/groups/g1/onenote/notebooks", json={"value": []})
        assert notebooks.list_notebooks(transport, OwnerContext.group("g1")) == []
        assert fake_graph.paths() == ["/groups/g1/onenote/notebooks"]

    def test_get_by_link(self, transport, fake_graph):
        fake_graph.add("GET", NB_PATH, json=NOTEBOOK_JSON)
        assert notebooks.get_notebook(transport, NB).id == "nb1"

    def test_get_by_name(self, transport, fake_graph):
        fake_graph.add("GET", "/me/onenote/notebooks", json={"value": [NOTEBOOK_JSON]})
        assert notebooks.get_notebook(transport, "work").display_name == "Work"

    def test_create(self, transport, fake_graph):
        fake_graph.add("POST", "/me/onenote/notebooks", status=201, json=NOTEBOOK_JSON)
        result = notebooks.create_notebook(transport, "Work")
        assert result.id == "nb1"
        assert json.loads(fake_graph.requests[0].content) == {"displayName": "Work"}


class TestListSections:
    def test_attaches_parent_from_record(self, transport, fake_graph):
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": [_section("s1", "A"), _section("s2", "B")]})
        parent = Notebook.from_json(NOTEBOOK_JSON)
        report = sections.list_sections(transport, [parent])

        assert [s.id for s in report.results] == ["s1", "s2"]
        assert all(s.parent_notebook is parent for s in report.results)

    def test_link_parent_becomes_stub(self, transport, fake_graph):
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": [_section("s1", "A")]})
        report = sections.list_sections(transport, [NB + "/sections"])
        assert report.results[0].parent_notebook == Notebook(self_url=NB)

    def test_keeps_parent_returned_by_api(self, transport, fake_graph):
        rich = dict(_section("s1", "A"), parentNotebook={"id": "nb1", "displayName": "Work"})
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": [rich]})
        report = sections.list_sections(transport, [NB])
        assert report.results[0].parent_notebook.display_name == "Work"

    def test_name_filter_on_children(self, transport, fake_graph):
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": []})
        sections.list_sections(transport, [NB], name="Gen*")
        assert fake_graph.requests[0].url.params["$filter"] == "startswith(tolower(displayName),'gen')"

    def test_notebook_name_is_looked_up_first(self, transport, fake_graph):
        fake_graph.add("GET", "/me/onenote/notebooks", json={"value": [NOTEBOOK_JSON]})
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": [_section("s1", "A")]})
        report = sections.list_sections(transport, ["Work"])

        assert fake_graph.paths() == ["/me/onenote/notebooks", NB_PATH + "/sections"]
        assert report.results[0].parent_notebook.display_name == "Work"

    def test_bad_handle_is_skipped(self, transport, fake_graph):
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": [_section("s1", "A")]})
        report = sections.list_sections(transport, [{"displayName": "no link"}, 42, NB])

        assert [s.id for s in report.results] == ["s1"]
        assert len(report.warnings) == 2
        assert report.ok

    def test_transport_failure_does_not_stop_batch(self, transport, fake_graph):
        fake_graph.add("GET", "/me/onenote/notebooks/bad/sections", status=503, json={"error": {"message": "busy"}})
        fake_graph.add("GET", NB_PATH + "/sections", json={"value": [_section("s1", "A")]})
        report = sections.list_sections(transport, [BASE + "/me/onenote/notebooks/bad", NB])

        assert [s.id for s in report.results] == ["s1"]
        assert report.errors[0].status == 503
        assert not report.ok

    def test_no_notebooks_is_fatal(self, transport, fake_graph):
        with pytest.raises(MissingTargetError):
            sections.list_sections(transport, [])
        assert fake_graph.requests == []


class TestCreateSection:
    def test_posts_to_notebook_sections(self, transport, fake_graph):
        fake_graph.add("POST", NB_PATH + "/sections", status=201, json=_section("s9", "New"))
        parent = Notebook.from_json(NOTEBOOK_JSON)
        result = sections.create_section(transport, parent, "New")

        assert isinstance(result, Section)
        assert result.parent_notebook is parent
        assert json.loads(fake_graph.requests[0].content) == {"displayName": "New"}

    @pytest.mark.parametrize("missing", [None, ""])
    def test_notebook_is_mandatory(self, transport, fake_graph, missing):
        with pytest.raises(MissingTargetError):
            sections.create_section(transport, missing, "New")
        assert fake_graph.requests == []

    def test_notebook_name_must_match_exactly_one(self, transport, fake_graph):
        other = dict(NOTEBOOK_JSON, id="nb2", self=BASE + "/me/onenote/notebooks/nb2")
        fake_graph.add("GET", "/me/onenote/notebooks", json={"value": [NOTEBOOK_JSON, other]})
        with pytest.raises(UnresolvableTargetError):
            sections.create_section(transport, "Work", "New")
        assert fake_graph.methods() == ["GET"]
