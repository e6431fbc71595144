import json

import pytest
import responses

from cfclient.projects import Project, ProjectsMixin
from cfclient.transport import ApiError, Transport, Variable

HOST = "https://api.example.com"


class _Client(ProjectsMixin, Transport):
    pass


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return _Client(HOST, "token")


def test_set_variables_appends():
    project = Project(variables=[Variable("a", "1")])
    project.set_variables({"b": "2"})
    assert [(v.key, v.value) for v in project.variables] == [("a", "1"), ("b", "2")]


def test_set_variables_rejects_non_string():
    with pytest.raises(TypeError):
        Project().set_variables({"b": 2})


def test_project_round_trip():
    project = Project(id="p1", project_name="demo", tags=["x"], variables=[Variable("k", "v")])
    data = project.to_dict()
    assert data["projectName"] == "demo"
    assert data["variables"] == [{"key": "k", "value": "v"}]
    assert Project.from_dict(data) == project


def test_empty_project_to_dict():
    assert Project().to_dict() == {}


def test_get_project_by_name(mocked, client):
    mocked.add(responses.GET, f"{HOST}/projects/name/demo", json={"id": "p1", "projectName": "demo"})
    project = ProjectsMixin.get_project_by_name(client, "demo")
    assert (project.id, project.project_name) == ("p1", "demo")


def test_get_project_by_id(mocked, client):
    mocked.add(responses.GET, f"{HOST}/projects/p1", json={"id": "p1", "tags": ["a"]})
    assert ProjectsMixin.get_project_by_id(client, "p1").tags == ["a"]


def test_create_project(mocked, client):
    project = Project(project_name="demo", tags=["t"])
    mocked.add(responses.POST, f"{HOST}/projects", json={"id": "p1", "projectName": "demo", "tags": ["t"]})
    created = client.create_project(project)
    assert created.id == "p1"
    assert json.loads(mocked.calls[0].request.body) == project.to_dict()


def test_update_project_requires_id(client):
    with pytest.raises(ValueError):
        client.update_project(Project(project_name="demo"))


def test_update_project_patches(mocked, client):
    mocked.add(responses.PATCH, f"{HOST}/projects/p1", body=b"{}")
    result = client.update_project(Project(id="p1", project_name="renamed"))
    assert result is None
    assert mocked.calls[0].request.method == "PATCH"
    assert json.loads(mocked.calls[0].request.body)["projectName"] == "renamed"


def test_delete_project_error(mocked, client):
    mocked.add(responses.DELETE, f"{HOST}/projects/p1", body=b"oops", status=500)
    with pytest.raises(ApiError) as info:
        ProjectsMixin.delete_project(client, "p1")
    assert info.value.status == 500