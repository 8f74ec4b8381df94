"""Timeline layer.

Bucketing, layer registration and playback. This package is the single
owner of which records belong to which time bucket and which buckets are
visible on the surface.
"""
