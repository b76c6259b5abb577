"""Image upload, retrieval and retention.

Uploads are written to a single directory as ``{uuid}{ext}``. Every upload
kicks off a background sweep that deletes files older than five minutes,
except the sentinel file that keeps the directory around.

Supported types: png, jpeg, gif, up to 20MB.
"""
