# @TASK S3-T3.0 - API 패키지 초기화

"""Linkstash REST API package.

Sub-modules expose FastAPI routers for each domain:
- search: unified, note, archived-note and link search
"""
