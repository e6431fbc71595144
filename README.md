# cfclient

Building blocks for talking to the Codefresh REST API from Python: an HTTP
transport, dataclasses for the API's objects, and mixin classes that add the
operations for accounts, identity providers, the current account, projects,
pipelines, permissions, step types and Hermes triggers. A few helpers turn
accounts and permissions into flat, configuration-style dictionaries and back.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Building a client

`cfclient.transport.Transport` sends JSON requests with a token in a header
(`Authorization` unless another header name is given). Each `*Mixin` class
adds operations that call `self.request(method, path, body, query)`, so a
client is a class that combines the transport with the mixins it needs:

```python
from cfclient.accounts import AccountsMixin
from cfclient.current_account import CurrentAccountMixin
from cfclient.hermes import HermesMixin
from cfclient.idps import IdpsMixin
from cfclient.permissions import PermissionsMixin
from cfclient.pipelines import PipelinesMixin
from cfclient.projects import ProjectsMixin
from cfclient.step_types import StepTypesMixin
from cfclient.transport import Transport


class Client(
    Transport,
    AccountsMixin,
    CurrentAccountMixin,
    HermesMixin,
    IdpsMixin,
    PermissionsMixin,
    PipelinesMixin,
    ProjectsMixin,
    StepTypesMixin,
):
    pass


client = Client("https://api.example.com", "token")
```

`Transport.request` accepts only 200 and 201 replies;
`Transport.request_with_access_token` sends an `x-access-token` header instead
and accepts only 200. Any other reply, or a failed connection, raises
`cfclient.transport.ApiError`, whose `status` and `body` hold the reply.

## Examples

Accounts and their feature flags:

```python
from cfclient.accounts import Account, account_admins_diff

account = client.get_account_by_name("demo")
account.set_features({"abac": True})
client.update_account(account)      # merges onto the stored account, then sets features

to_add, to_remove = account_admins_diff(["u1", "u2"], account.admins)
```

Projects and pipelines:

```python
project = client.get_project_by_name("demo")
pipeline = client.get_pipeline("demo/build")
pipeline.set_variables({"ENV": "staging"})
client.update_pipeline(pipeline)
```

Permissions:

```python
from cfclient.permissions import Permission

rules = client.get_permission_list(team_id="team-id", action="run")
created = client.create_permission(
    Permission(team="team-id", resource="pipeline", action="run", tags=["*"])
)
```

Identity providers, step types and Hermes triggers:

```python
idp = client.get_idp_by_name("github")
client.add_account_to_idp("account-id", idp.id)

versions = client.get_step_types_versions("my-step")
step = client.get_step_types("my-step:" + versions[0])

trigger = client.get_hermes_trigger("registry:dockerhub:repo:push", "pipeline-id")
```

Event names in Hermes paths are URI-encoded twice
(`cfclient.transport.uri_encode_event`), as the API expects.

## Configuration-style mapping

`cfclient.resources` converts between API objects and flat dictionaries:

```python
from cfclient.resources import account_from_config, permission_from_config

account = account_from_config({"name": "demo", "limits": [{"collaborators": 10}]})
# features default to a fixed set of enabled flags,
# data_retention_weeks defaults to 5 and build nodes to 1

permission = permission_from_config({"team": "team-id", "resource": "cluster", "action": "read"})
# tags default to ["*", "untagged"]; unknown resources or actions raise ValueError
```

`account_to_state` and `permission_to_state` produce the reverse form.
`sync_account_admins(client, account_id, desired)` adds and removes admins so
that the account's admins equal `desired`; it needs a client that provides
`get_account_by_id`, `set_user_as_account_admin` and
`delete_user_as_account_admin`.

## What is not included

- There is no ready-made client class and no configuration from environment
  variables; combine `Transport` with the mixins as shown above.
- There are no operations for contexts, container registries, teams or users.
  In particular the package does not provide `set_user_as_account_admin` or
  `delete_user_as_account_admin`, which `sync_account_admins` calls, so that
  helper works only with a client that supplies them.
- There is no command-line tool.

## Modules

- `cfclient.transport` – `Transport`, `ApiError`, `Variable`, JSON and URI helpers
- `cfclient.accounts` – `Account`, `Limits`, `Build`, `merge_with_overwrite`,
  `account_admins_diff`, `AccountsMixin`
- `cfclient.current_account` – `CurrentAccount`, `CurrentAccountMixin`
- `cfclient.idps` – `IDP`, `IdpsMixin`
- `cfclient.projects` – `Project`, `ProjectsMixin`
- `cfclient.pipelines` – `Pipeline`, `Trigger`, `PipelinesMixin`
- `cfclient.permissions` – `Permission`, `PermissionsMixin`
- `cfclient.step_types` – `StepTypes`, `StepTypesVersion`, `StepTypesVersions`,
  `StepTypesMixin`
- `cfclient.hermes` – `HermesTrigger`, `HermesTriggerEvent`, `EventData`, `HermesMixin`
- `cfclient.resources` – mapping of accounts, account admins and permissions
  to and from configuration dictionaries