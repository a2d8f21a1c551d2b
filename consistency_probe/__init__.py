"""
S3 Consistency Probe
====================

Read-after-write consistency checker for S3 and S3-compatible object storage.

A write worker stores a range of objects one at a time; after each successful
write an in-process event broker synchronously triggers a read worker that
reads the object straight back. Failures on either side are collected into a
report.
"""

__version__ = "0.1.0"
