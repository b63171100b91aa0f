"""Core constants: cache key prefixes and shared literal values."""

# Ephemeral key prefixes (joined with CACHE_KEY_SEP, namespaced by settings.cache_key_prefix)
CACHE_PREFIX_REPLICATE = "replicate"
CACHE_PREFIX_NEW_STORY = "new_story"

CACHE_KEY_SEP = ":"

# Subject the storage service sets on object notifications delivered through SNS
S3_NOTIFICATION_SUBJECT = "Amazon S3 Notification"
OBJECT_CREATED_EVENT_PREFIX = "ObjectCreated:"

MANIFEST_MIME_TYPE = "application/json"
