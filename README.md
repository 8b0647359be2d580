# tagserver

Building blocks for a server that exposes Google Tag Manager operations as
tools. The package contains:

- dataclasses for request and response records, with conversion to
  API-shaped JSON
- input validation and resource path builders
- converters that turn API resources into the records the tools return
- builders that turn tool arguments into updates for tags, triggers,
  variables, clients and transformations
- checks that run before a version is created or published
- WSGI middleware that rate-limits requests per IP and limits the size of
  request bodies
- a logging wrapper for async tool-server request handlers

The package has no runtime dependencies.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `tagserver.types`

This module holds dataclasses such as `Parameter`, `Condition`, `TagInput`,
`TriggerInput`, `VariableInput`, `VersionInput`, `ClientInput`,
`TransformationInput`, `WorkspaceStatus`, `PublishedVersion`, and the
`Created*` result records.

- `to_json(obj)` turns these dataclasses, and lists or dicts that hold them,
  into dictionaries that use the API's camelCase keys. Empty optional fields
  are left out. The `has_*` and `clear_*` flags on `TagInput` never appear in
  the output.
- `parse_parameters(text)` and `parse_conditions(text)` read a JSON array. On
  malformed input they raise `ValueError`.
- `WorkspaceStatus.from_response(response)` summarises the status of a
  workspace. It reports whether there are changes and conflicts, and how many
  of each.

### `tagserver.validation`

- The checks are `validate_tag_input`, `validate_trigger_input`,
  `validate_variable_input`, `validate_client_input`,
  `validate_transformation_input`, `validate_workspace_path` and
  `validate_container_path`.
- Each check raises `ValidationError` when a required field is blank or a
  name is longer than 256 bytes. `ValidationError` is a subclass of
  `ValueError`.
- `build_workspace_path` and `build_container_path` build resource paths of
  the form `accounts/<id>/containers/<id>[/workspaces/<id>]`.

### `tagserver.converters`

- `to_triggers`, `to_variables` and `to_workspaces` turn API resources into
  `Trigger`, `Variable` and `Workspace` records.
- `to_transformation` and `to_transformations` turn API resources into
  `TransformationInfo` records.
- `created_transformation` builds a `CreatedTransformation` record.
- Filters and parameters are kept only when they are non-empty.

### `tagserver.templates`

- `template_type` works out the type string that a tag uses for a custom
  template:
  - `cvt_<galleryTemplateId>` for gallery templates
  - `cvt_<containerId>_<templateId>` otherwise
- `template_info` and `list_template_infos` build `TemplateInfo` records.
- `validate_gallery_import` checks a gallery import request, and
  `import_message` gives the message reported after an import.
- `validate_template_update` checks a template update request.
  `merge_template_update` builds the body for the update from the current
  template and the fields that were given.
- `version_infos` builds `VersionInfo` records from a response that lists
  version headers.

### `tagserver.tag_updates`

- `build_tag_update(args)` turns `update_tag` arguments into a `TagInput`. It
  records which fields were given, so that the existing values can be kept for
  the rest. An empty `setupTagJson` or `teardownTagJson` array marks that
  sequencing for clearing.
- `parse_consent_types` splits a comma-separated list.
- `build_trigger_update(args)` returns a `TriggerInput` and a warning.
  `remap_auto_event_filter` moves auto-event conditions into `filter` for
  `linkClick`, `click` and `formSubmission` triggers.
- `trigger_update_message` adds any such warning to the success message.

### `tagserver.updates`

- `build_variable_update`, `build_client_update` and
  `build_transformation_update` turn tool arguments into input records.
- `create_version_precheck(status)` returns a `VersionCheck` with `proceed`
  and `message`. It refuses when there are no changes and when there are
  conflicts.
- `publish_precheck` refuses when there is no confirmation. It raises
  `ValidationError` when an identifier is missing.
- `publish_message` gives the text reported after a version is published.

### `tagserver.ratelimit`

- `RateLimiter(rps, burst)` gives each client IP its own `TokenBucket`.
  - `allow(ip)` reports whether a request may proceed.
  - `prune()` forgets clients that have been idle longer than the idle
    timeout (180 s by default).
  - New clients are refused once `max_visitors` IPs are being tracked
    (10,000 by default).
- `middleware(app)` wraps a WSGI app. A request over the limit gets
  `429 Too Many Requests` with `Retry-After: 1` and this body:

  ```
  {"error":"rate_limit_exceeded","error_description":"Too many requests. Please retry later."}
  ```

- `extract_client_ip(environ)` finds the client IP. It uses the leftmost
  `X-Forwarded-For` entry, and `REMOTE_ADDR` when that header is missing.
- `max_bytes_middleware(max_bytes, app)` wraps `wsgi.input` so that reading
  more than `max_bytes` raises `ValueError`.

### `tagserver.mcplog`

- `logging_middleware(logger, handler)` wraps an async handler that is called
  as `handler(method, params, session_id)`.
  - It logs the request, then its completion or failure, with the duration in
    milliseconds.
  - The structured fields go in the record's `mcp` attribute.
  - Timeouts are re-raised without an error record.
- `extract_tool_name` returns the tool name of a `tools/call` request.

## Examples

Rate-limiting a WSGI app and limiting the size of request bodies:

```python
from tagserver.ratelimit import RateLimiter, max_bytes_middleware

def app(environ, start_response):
    start_response("200 OK", [("Content-Type", "text/plain")])
    return [b"ok"]

limiter = RateLimiter(10, 20)  # 10 requests/s, burst of 20, per client IP
wrapped = limiter.middleware(max_bytes_middleware(1 << 20, app))
```

Building a trigger update. The `linkClick` type drops auto-event filters, so
the conditions are moved to `filter`:

```python
from tagserver.tag_updates import build_trigger_update, trigger_update_message

trigger, warning = build_trigger_update({
    "triggerId": "3",
    "name": "Outbound clicks",
    "type": "linkClick",
    "autoEventFilterJson": '[{"type": "contains", "parameter": ['
                           '{"type": "template", "key": "arg0", "value": "{{Click URL}}"},'
                           '{"type": "template", "key": "arg1", "value": "example.com"}]}]',
})
assert trigger.auto_event_filter == [] and len(trigger.filter) == 1
print(trigger_update_message(warning))
```

## What this package does not do

- It does not call the Tag Manager API and has no HTTP client.
- It has no OAuth or token handling.
- It does not register any tools.
- It provides no runnable server or command.

It supplies the validation, the request bodies, the response shaping and the
middleware that such a server is built from.