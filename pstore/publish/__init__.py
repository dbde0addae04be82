"""Publishing to the Google Play catalog.

- request: validation of raw settings into a PublishRequest
- orchestrator: the edit lifecycle (create, upload, verify, validate, commit)
- catalog / google_play: the catalog client protocol and its implementations
- integrity / progress: hashing and progress reporting around uploads
"""

from __future__ import annotations
