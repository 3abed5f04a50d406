"""Linkstash: notes and links saved from Telegram, searchable from the web."""
