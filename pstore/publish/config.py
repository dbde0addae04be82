from __future__ import annotations

# https://developers.google.com/android-publisher/tracks
TRACK_INTERNAL = "internal"
TRACK_ALPHA = "alpha"
TRACK_BETA = "beta"
TRACK_PRODUCTION = "production"

# Production is deliberately not publishable from this tool.
ALLOWED_TRACKS: tuple[str, ...] = (TRACK_INTERNAL, TRACK_ALPHA, TRACK_BETA)
DEFAULT_TRACK = TRACK_INTERNAL

# https://developers.google.com/android-publisher/api-ref/rest/v3/edits.tracks
STATUS_DRAFT = "draft"

# https://developers.google.com/android-publisher/api-ref/rest/v3/edits.deobfuscationfiles
DEOBFUSCATION_FILE_PROGUARD = "proguard"

ANDROID_PUBLISHER_SCOPE = "https://www.googleapis.com/auth/androidpublisher"
MEDIA_MIME_TYPE = "application/octet-stream"

# Resumable upload tuning
UPLOAD_CHUNK_SIZE = 8 * 1024 * 1024
UPLOAD_NUM_RETRIES = 5

PROGRESS_INTERVAL_SECONDS = 3.0
HASH_CHUNK_SIZE = 1024 * 1024
